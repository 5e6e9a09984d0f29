"""Rule store: CRUD operations and firing bookkeeping for automation rules."""

import logging
from collections.abc import Iterable
from datetime import datetime
from typing import Any

from src.core import db_client
from src.core.db_client import RecordNotFoundError
from src.core.logging import span
from src.domain.automation import AutomationRule
from src.domain.create_models import AutomationRuleCreate


logger = logging.getLogger(__name__)

COLLECTION = "automation_rules"


def _to_rule(record: dict[str, Any]) -> AutomationRule:
    return AutomationRule.model_validate(record)


async def create_rule(*, data: AutomationRuleCreate) -> AutomationRule:
    """Persist a new automation rule with zeroed firing statistics."""
    with span("rule_service.create_rule"):
        payload = {**data.model_dump(), "execution_count": 0, "last_run": None}
        record = await db_client.create_record(collection=COLLECTION, data=payload)
        logger.info(
            "Created automation rule '%s' (%s -> %s)",
            data.name,
            data.trigger_type,
            data.action_type,
        )
        return _to_rule(record)


async def get_rule(*, rule_id: str) -> AutomationRule:
    """Fetch a rule by ID.

    Raises:
        db_client.RecordNotFoundError: If the rule does not exist
    """
    record = await db_client.get_record(collection=COLLECTION, record_id=rule_id)
    return _to_rule(record)


async def list_rules() -> list[AutomationRule]:
    """List all rules, newest first (the evaluation order used by the engine)."""
    records = await db_client.list_all_records(collection=COLLECTION, sort="-created")
    return [_to_rule(record) for record in records]


async def toggle_rule(*, rule_id: str) -> AutomationRule:
    """Flip a rule's `active` flag."""
    with span("rule_service.toggle_rule"):
        rule = await get_rule(rule_id=rule_id)
        record = await db_client.update_record(
            collection=COLLECTION,
            record_id=rule_id,
            data={"active": not rule.active},
        )
        updated = _to_rule(record)
        logger.info("Rule %s is now %s", rule_id, "active" if updated.active else "inactive")
        return updated


async def delete_rule(*, rule_id: str) -> None:
    """Delete a rule.

    Raises:
        db_client.RecordNotFoundError: If the rule does not exist
    """
    with span("rule_service.delete_rule"):
        await db_client.delete_record(collection=COLLECTION, record_id=rule_id)
        logger.info("Deleted automation rule %s", rule_id)


async def record_firings(*, rule_ids: Iterable[str], fired_at: datetime) -> list[AutomationRule]:
    """Increment `execution_count` and stamp `last_run` on each fired rule.

    Rules deleted between evaluation and bookkeeping are skipped.

    Args:
        rule_ids: IDs reported by the engine as fired
        fired_at: Time the result is being applied

    Returns:
        The updated rules
    """
    with span("rule_service.record_firings"):
        updated = []
        for rule_id in rule_ids:
            try:
                rule = (await get_rule(rule_id=rule_id)).record_firing(fired_at)
                record = await db_client.update_record(
                    collection=COLLECTION,
                    record_id=rule_id,
                    data={"execution_count": rule.execution_count, "last_run": rule.last_run},
                )
                updated.append(_to_rule(record))
            except RecordNotFoundError:
                logger.warning("Fired rule %s no longer exists; skipping stats update", rule_id)
        return updated
