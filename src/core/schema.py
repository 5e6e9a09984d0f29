"""SQLite schema management (code-first approach)."""

import logging

import aiosqlite


logger = logging.getLogger(__name__)


# Central list of all collections in the schema
COLLECTIONS = [
    "tasks",
    "automation_rules",
    "notifications",
]


TABLE_SCHEMAS: dict[str, str] = {
    "tasks": """
        CREATE TABLE IF NOT EXISTS tasks (
            id TEXT PRIMARY KEY,
            created TEXT NOT NULL,
            updated TEXT NOT NULL,
            title TEXT NOT NULL,
            status TEXT NOT NULL DEFAULT 'pending'
                CHECK (status IN ('pending', 'in-progress', 'completed')),
            priority TEXT NOT NULL DEFAULT 'medium'
                CHECK (priority IN ('high', 'medium', 'low')),
            due_date TEXT NOT NULL,
            category TEXT,
            description TEXT,
            source TEXT NOT NULL DEFAULT 'manual',
            ai_confidence REAL,
            assigned_to TEXT
        )
    """,
    "automation_rules": """
        CREATE TABLE IF NOT EXISTS automation_rules (
            id TEXT PRIMARY KEY,
            created TEXT NOT NULL,
            updated TEXT NOT NULL,
            name TEXT NOT NULL,
            description TEXT NOT NULL DEFAULT '',
            trigger_type TEXT NOT NULL
                CHECK (trigger_type IN ('ON_CREATE', 'ON_COMPLETE', 'ON_OVERDUE', 'KEYWORD_MATCH')),
            trigger_condition TEXT,
            action_type TEXT NOT NULL
                CHECK (action_type IN ('NOTIFY', 'SET_PRIORITY', 'ASSIGN_USER', 'DELETE')),
            action_target TEXT,
            active INTEGER NOT NULL DEFAULT 1,
            execution_count INTEGER NOT NULL DEFAULT 0,
            last_run TEXT
        )
    """,
    "notifications": """
        CREATE TABLE IF NOT EXISTS notifications (
            id TEXT PRIMARY KEY,
            created TEXT NOT NULL,
            updated TEXT NOT NULL,
            type TEXT NOT NULL,
            source TEXT NOT NULL,
            title TEXT NOT NULL,
            message TEXT NOT NULL,
            timestamp TEXT NOT NULL,
            read INTEGER NOT NULL DEFAULT 0,
            priority TEXT
        )
    """,
}

INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_tasks_status ON tasks (status)",
    "CREATE INDEX IF NOT EXISTS idx_rules_trigger ON automation_rules (trigger_type, active)",
    "CREATE INDEX IF NOT EXISTS idx_notifications_read ON notifications (read, timestamp)",
]


async def init_db(conn: aiosqlite.Connection) -> None:
    """Create all tables and indexes (idempotent)."""
    logger.info("Starting SQLite schema sync...")

    for collection in COLLECTIONS:
        await conn.execute(TABLE_SCHEMAS[collection])
        logger.debug("Ensured table %s", collection)

    for index in INDEXES:
        await conn.execute(index)

    await conn.commit()
    logger.info("SQLite schema sync complete", extra={"collections": COLLECTIONS})
