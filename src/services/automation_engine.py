"""Automation rule engine.

Evaluates user-authored "if trigger then action" rules against a snapshot of
the task collection and returns a description of the resulting changes. The
engine performs no I/O and never mutates its inputs: callers apply the returned
`EngineResult` to storage themselves (see `automation_service`).

Rules are folded left to right over an accumulator of
(working tasks, notifications, fired rule ids). A rule that mutates the working
collection affects every later rule in the same call, including the overdue
rescan of later ON_OVERDUE rules.
"""

import logging
import uuid
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import UTC, datetime
from functools import reduce
from typing import assert_never

from pydantic import BaseModel, ConfigDict, Field

from src.core.config import constants
from src.domain.automation import ActionType, AutomationRule, TriggerType
from src.domain.notification import AppNotification, NotificationPriority, NotificationType
from src.domain.task import Priority, Task


logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]
IdFactory = Callable[[], str]

GENERIC_NOTIFICATION_MESSAGE = "An automation rule was triggered."


def utc_now() -> datetime:
    """Default time source."""
    return datetime.now(UTC)


def new_notification_id() -> str:
    """Default identifier factory for engine-produced notifications."""
    return str(uuid.uuid4())


class EngineResult(BaseModel):
    """Outcome of one evaluation pass."""

    model_config = ConfigDict(frozen=True)

    updated_tasks: list[Task] = Field(default_factory=list)
    new_notifications: list[AppNotification] = Field(default_factory=list)
    fired_rule_ids: list[str] = Field(default_factory=list)

    def merge(self, later: "EngineResult") -> "EngineResult":
        """Combine this pass with a later chained pass.

        The later pass must have been evaluated against `self.updated_tasks`, so
        its task collection is the final state. Notifications are concatenated in
        firing order and fired rule ids are unioned, keeping first-seen order.
        """
        fired = list(dict.fromkeys([*self.fired_rule_ids, *later.fired_rule_ids]))
        return EngineResult(
            updated_tasks=later.updated_tasks,
            new_notifications=[*self.new_notifications, *later.new_notifications],
            fired_rule_ids=fired,
        )


@dataclass(frozen=True)
class _Accumulator:
    tasks: tuple[Task, ...]
    notifications: tuple[AppNotification, ...] = ()
    fired_ids: tuple[str, ...] = ()


def _matches_keyword(task: Task, keyword: str) -> bool:
    needle = keyword.lower()
    return needle in task.title.lower() or needle in (task.description or "").lower()


def _select_target(
    rule: AutomationRule,
    tasks: Sequence[Task],
    context_task: Task | None,
    now: datetime,
) -> tuple[bool, Task | None]:
    """Decide whether `rule` fires, and which task its action applies to."""
    match rule.trigger_type:
        case TriggerType.ON_CREATE:
            return context_task is not None, context_task
        case TriggerType.KEYWORD_MATCH:
            keyword = rule.trigger_condition
            fires = context_task is not None and bool(keyword) and _matches_keyword(context_task, keyword)
            return fires, context_task
        case TriggerType.ON_COMPLETE:
            return context_task is not None and context_task.is_completed, context_task
        case TriggerType.ON_OVERDUE:
            # Fires once per call, targeting the first overdue task in collection order
            first_overdue = next((task for task in tasks if task.is_overdue(now)), None)
            return first_overdue is not None, first_overdue
        case _:
            assert_never(rule.trigger_type)


def _parse_priority(value: str | None) -> Priority | None:
    if not value:
        return None
    try:
        return Priority(value.strip().lower())
    except ValueError:
        return None


def _build_notification(
    rule: AutomationRule,
    target: Task | None,
    now: datetime,
    id_factory: IdFactory,
) -> AppNotification:
    if rule.action_target:
        message = rule.action_target
    elif target is not None:
        message = f"Rule triggered by task: {target.title}"
    else:
        message = GENERIC_NOTIFICATION_MESSAGE

    return AppNotification(
        id=id_factory(),
        type=NotificationType.AUTOMATION,
        source=constants.NOTIFICATION_SOURCE,
        title=f"{constants.AUTOMATION_TITLE_PREFIX}{rule.name}",
        message=message,
        timestamp=now,
        read=False,
        priority=NotificationPriority.NORMAL,
    )


def _apply_action(
    acc: _Accumulator,
    rule: AutomationRule,
    target: Task | None,
    now: datetime,
    id_factory: IdFactory,
) -> _Accumulator:
    fired_ids = acc.fired_ids if rule.id in acc.fired_ids else (*acc.fired_ids, rule.id)
    tasks = acc.tasks
    notifications = acc.notifications

    match rule.action_type:
        case ActionType.NOTIFY:
            notifications = (*notifications, _build_notification(rule, target, now, id_factory))
        case ActionType.SET_PRIORITY:
            priority = _parse_priority(rule.action_target)
            if target is not None and priority is not None:
                tasks = tuple(
                    task.model_copy(update={"priority": priority}) if task.id == target.id else task
                    for task in tasks
                )
            else:
                logger.debug("SET_PRIORITY skipped", extra={"rule_id": rule.id, "action_target": rule.action_target})
        case ActionType.DELETE:
            if target is not None:
                tasks = tuple(task for task in tasks if task.id != target.id)
        case ActionType.ASSIGN_USER:
            # Declared in the rule vocabulary but has no behaviour yet
            logger.debug("ASSIGN_USER is not supported; rule fired without effect", extra={"rule_id": rule.id})
        case _:
            assert_never(rule.action_type)

    return _Accumulator(tasks=tasks, notifications=notifications, fired_ids=fired_ids)


def evaluate(
    tasks: Sequence[Task],
    rules: Sequence[AutomationRule],
    trigger_type: TriggerType,
    context_task: Task | None = None,
    *,
    clock: Clock = utc_now,
    id_factory: IdFactory = new_notification_id,
) -> EngineResult:
    """Evaluate `rules` for one trigger event.

    Args:
        tasks: Snapshot of the current task collection
        rules: Snapshot of the rule collection; evaluation follows its order
        trigger_type: Event class being reported; only active rules of this type run
        context_task: Task the event is about (ignored by ON_OVERDUE rules)
        clock: Time source, sampled once per call for overdue checks and notification timestamps
        id_factory: Identifier factory for new notifications

    Returns:
        EngineResult with the updated task collection, new notifications in
        firing order, and the ids of rules that fired.
    """
    now = clock()
    candidates = [rule for rule in rules if rule.active and rule.trigger_type == trigger_type]

    def step(acc: _Accumulator, rule: AutomationRule) -> _Accumulator:
        fires, target = _select_target(rule, acc.tasks, context_task, now)
        if not fires:
            return acc
        return _apply_action(acc, rule, target, now, id_factory)

    final = reduce(step, candidates, _Accumulator(tasks=tuple(tasks)))

    if final.fired_ids:
        logger.info(
            "Automation rules fired",
            extra={
                "trigger": str(trigger_type),
                "fired_rule_ids": list(final.fired_ids),
                "notifications": len(final.notifications),
            },
        )

    return EngineResult(
        updated_tasks=list(final.tasks),
        new_notifications=list(final.notifications),
        fired_rule_ids=list(final.fired_ids),
    )
