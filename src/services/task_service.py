"""Task store: CRUD operations over the tasks collection."""

import logging
from typing import Any

from src.core import db_client
from src.core.config import constants
from src.core.logging import span
from src.domain.create_models import TaskCreate
from src.domain.task import Task, TaskStatus


logger = logging.getLogger(__name__)

COLLECTION = "tasks"


def _to_task(record: dict[str, Any]) -> Task:
    return Task.model_validate(record)


async def create_task(*, data: TaskCreate) -> Task:
    """Persist a new task.

    Args:
        data: Validated task fields

    Returns:
        Created task with its generated ID

    Raises:
        db_client.DatabaseError: If database operation fails
    """
    with span("task_service.create_task"):
        record = await db_client.create_record(collection=COLLECTION, data=data.model_dump())
        logger.info("Created task: %s (priority: %s)", data.title, data.priority)
        return _to_task(record)


async def get_task(*, task_id: str) -> Task:
    """Fetch a task by ID.

    Raises:
        db_client.RecordNotFoundError: If the task does not exist
    """
    record = await db_client.get_record(collection=COLLECTION, record_id=task_id)
    return _to_task(record)


async def list_tasks(*, status: TaskStatus | None = None) -> list[Task]:
    """List up to one page of tasks, newest first."""
    with span("task_service.list_tasks"):
        filter_query = f'status = "{db_client.sanitize_param(status)}"' if status else ""
        records = await db_client.list_records(
            collection=COLLECTION,
            filter_query=filter_query,
            sort="-created",
            per_page=constants.DEFAULT_PER_PAGE_LIMIT,
        )
        return [_to_task(record) for record in records]


async def list_all_tasks() -> list[Task]:
    """Load the whole task collection, newest first.

    This is the collection order the automation engine and statistics see.
    """
    with span("task_service.list_all_tasks"):
        records = await db_client.list_all_records(collection=COLLECTION, sort="-created")
        return [_to_task(record) for record in records]


async def update_task(*, task_id: str, changes: dict[str, Any]) -> Task:
    """Apply a partial update to a task and return the stored result.

    Raises:
        db_client.RecordNotFoundError: If the task does not exist
        ValueError: If `changes` is empty
    """
    with span("task_service.update_task"):
        changes = {key: value for key, value in changes.items() if key != "id"}
        record = await db_client.update_record(collection=COLLECTION, record_id=task_id, data=changes)
        logger.info("Updated task %s: %s", task_id, sorted(changes))
        return _to_task(record)


async def delete_task(*, task_id: str) -> None:
    """Delete a task.

    Raises:
        db_client.RecordNotFoundError: If the task does not exist
    """
    with span("task_service.delete_task"):
        await db_client.delete_record(collection=COLLECTION, record_id=task_id)
        logger.info("Deleted task %s", task_id)
