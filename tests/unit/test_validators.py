"""Tests for create/update model validation."""

from datetime import UTC, datetime

import pytest
from pydantic import ValidationError

from src.domain.automation import ActionType, TriggerType
from src.domain.create_models import AutomationRuleCreate, TaskCreate
from src.domain.task import Priority, TaskStatus
from src.domain.update_models import TaskUpdate


@pytest.mark.unit
class TestAutomationRuleCreate:
    """Rule authoring validation."""

    def test_accepts_camel_case_payload(self):
        rule = AutomationRuleCreate.model_validate(
            {
                "name": "Urgent Client Tasks",
                "triggerType": "KEYWORD_MATCH",
                "triggerCondition": "Client",
                "actionType": "SET_PRIORITY",
                "actionTarget": "high",
            }
        )

        assert rule.trigger_type == TriggerType.KEYWORD_MATCH
        assert rule.action_target == "high"
        assert rule.active is True

    @pytest.mark.parametrize("condition", [None, "", "   "])
    def test_keyword_match_requires_condition(self, condition):
        with pytest.raises(ValidationError, match="non-empty trigger condition"):
            AutomationRuleCreate(
                name="Keyword",
                trigger_type=TriggerType.KEYWORD_MATCH,
                trigger_condition=condition,
                action_type=ActionType.NOTIFY,
            )

    def test_assign_user_is_rejected(self):
        with pytest.raises(ValidationError, match="not supported"):
            AutomationRuleCreate(
                name="Assign",
                trigger_type=TriggerType.ON_CREATE,
                action_type=ActionType.ASSIGN_USER,
                action_target="user-1",
            )

    @pytest.mark.parametrize("target", [None, "urgent"])
    def test_set_priority_requires_known_priority(self, target):
        with pytest.raises(ValidationError):
            AutomationRuleCreate(
                name="Priority",
                trigger_type=TriggerType.ON_CREATE,
                action_type=ActionType.SET_PRIORITY,
                action_target=target,
            )

    def test_unknown_trigger_is_rejected(self):
        with pytest.raises(ValidationError):
            AutomationRuleCreate.model_validate(
                {"name": "Bad", "triggerType": "ON_UPDATE", "actionType": "NOTIFY"}
            )

    def test_empty_name_is_rejected(self):
        with pytest.raises(ValidationError, match="cannot be empty"):
            AutomationRuleCreate(name=" ", trigger_type=TriggerType.ON_CREATE, action_type=ActionType.DELETE)


@pytest.mark.unit
class TestTaskModels:
    """Task create/update validation."""

    def test_naive_due_date_is_treated_as_utc(self):
        task = TaskCreate(title="Plan", due_date=datetime(2025, 6, 1, 9, 0))

        assert task.due_date == datetime(2025, 6, 1, 9, 0, tzinfo=UTC)

    def test_title_too_long(self):
        with pytest.raises(ValidationError, match="too long"):
            TaskCreate(title="x" * 201, due_date=datetime(2025, 6, 1, tzinfo=UTC))

    def test_invalid_status(self):
        with pytest.raises(ValidationError):
            TaskCreate.model_validate({"title": "t", "dueDate": "2025-06-01T00:00:00Z", "status": "done"})

    def test_update_changes_only_set_fields(self):
        update = TaskUpdate.model_validate({"status": "completed", "priority": "high"})

        assert update.changes() == {"status": TaskStatus.COMPLETED, "priority": Priority.HIGH}

    def test_empty_update_has_no_changes(self):
        assert TaskUpdate().changes() == {}
