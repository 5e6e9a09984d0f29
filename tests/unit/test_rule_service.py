"""Unit tests for rule_service module."""

from datetime import UTC, datetime, timedelta

import pytest

from src.core.db_client import RecordNotFoundError
from src.domain.automation import ActionType, TriggerType
from src.domain.create_models import AutomationRuleCreate
from src.services import rule_service


NOW = datetime(2025, 6, 1, 12, 0, tzinfo=UTC)


def rule_data(**overrides) -> AutomationRuleCreate:
    fields = {
        "name": "Overdue Watchdog",
        "description": "Notify when a task is overdue",
        "trigger_type": TriggerType.ON_OVERDUE,
        "action_type": ActionType.NOTIFY,
        "action_target": "A task is overdue!",
    }
    fields.update(overrides)
    return AutomationRuleCreate(**fields)


@pytest.mark.unit
class TestRuleCrud:
    """Create, list, toggle and delete."""

    async def test_create_starts_with_zeroed_statistics(self, patched_db):
        rule = await rule_service.create_rule(data=rule_data())

        assert rule.id
        assert rule.active is True
        assert rule.execution_count == 0
        assert rule.last_run is None
        assert rule.trigger_type == TriggerType.ON_OVERDUE

    async def test_list_returns_newest_first(self, patched_db):
        first = await rule_service.create_rule(data=rule_data(name="First"))
        second = await rule_service.create_rule(data=rule_data(name="Second"))

        rules = await rule_service.list_rules()

        assert [r.id for r in rules] == [second.id, first.id]

    async def test_toggle_flips_active(self, patched_db):
        rule = await rule_service.create_rule(data=rule_data())

        toggled = await rule_service.toggle_rule(rule_id=rule.id)
        restored = await rule_service.toggle_rule(rule_id=rule.id)

        assert toggled.active is False
        assert restored.active is True

    async def test_toggle_missing_rule(self, patched_db):
        with pytest.raises(RecordNotFoundError):
            await rule_service.toggle_rule(rule_id="missing")

    async def test_delete(self, patched_db):
        rule = await rule_service.create_rule(data=rule_data())

        await rule_service.delete_rule(rule_id=rule.id)

        assert await rule_service.list_rules() == []
        with pytest.raises(RecordNotFoundError):
            await rule_service.get_rule(rule_id=rule.id)


@pytest.mark.unit
class TestRecordFirings:
    """Firing bookkeeping."""

    async def test_increments_count_and_sets_last_run(self, patched_db):
        rule = await rule_service.create_rule(data=rule_data())

        (updated,) = await rule_service.record_firings(rule_ids=[rule.id], fired_at=NOW)

        assert updated.execution_count == 1
        assert updated.last_run == NOW

    async def test_last_run_never_moves_backwards(self, patched_db):
        rule = await rule_service.create_rule(data=rule_data())
        await rule_service.record_firings(rule_ids=[rule.id], fired_at=NOW)

        (updated,) = await rule_service.record_firings(rule_ids=[rule.id], fired_at=NOW - timedelta(hours=1))

        assert updated.execution_count == 2
        assert updated.last_run == NOW

    async def test_skips_deleted_rules(self, patched_db):
        rule = await rule_service.create_rule(data=rule_data())

        updated = await rule_service.record_firings(rule_ids=["gone", rule.id], fired_at=NOW)

        assert [r.id for r in updated] == [rule.id]
