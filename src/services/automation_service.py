"""Execution coordinator for automation rules.

Runs the automation engine at the three points where rules can fire (task
created, task completed, periodic overdue check) and applies the engine's
result to the task, notification, and rule stores.

Each read-evaluate-write cycle holds a process-wide lock so two cycles never
interleave their writes. Across processes the last writer wins.

A result is applied as a sequence of separately committed writes: task deletes
and updates, then notifications, then rule statistics. If a DatabaseError
interrupts the sequence, the writes before it stay committed and the rest are
not attempted; the error propagates to the caller.
"""

import asyncio
import logging
from collections.abc import Sequence

from src.core.db_client import RecordNotFoundError
from src.core.logging import log_with_context, span
from src.domain.automation import AutomationRule, TriggerType
from src.domain.task import Task
from src.models.service_models import AutomationOutcome
from src.services import notification_service, rule_service, task_service
from src.services.automation_engine import Clock, EngineResult, evaluate, utc_now


logger = logging.getLogger(__name__)

_automation_lock = asyncio.Lock()


async def _load_snapshot() -> tuple[list[Task], list[AutomationRule]]:
    tasks = await task_service.list_all_tasks()
    rules = await rule_service.list_rules()
    return tasks, rules


def _task_changes(before: Task, after: Task) -> dict:
    before_fields = before.model_dump()
    return {key: value for key, value in after.model_dump().items() if before_fields.get(key) != value}


async def apply_result(
    *,
    trigger: str,
    before: Sequence[Task],
    result: EngineResult,
    clock: Clock = utc_now,
) -> AutomationOutcome:
    """Persist an engine result.

    Tasks missing from `result.updated_tasks` are deleted, tasks whose fields
    changed are updated, new notifications are stored, and every fired rule has
    its statistics bumped with the time of application.

    Args:
        trigger: Label for logging (e.g. "ON_CREATE+KEYWORD_MATCH")
        before: Task snapshot the engine was first called with
        result: Engine output (possibly merged across chained passes)
        clock: Time source for rule `last_run` stamps

    Returns:
        AutomationOutcome describing what was written
    """
    with span("automation_service.apply_result"):
        before_by_id = {task.id: task for task in before}
        after_ids = {task.id for task in result.updated_tasks}

        deleted_ids = []
        for task_id in before_by_id:
            if task_id in after_ids:
                continue
            try:
                await task_service.delete_task(task_id=task_id)
                deleted_ids.append(task_id)
            except RecordNotFoundError:
                logger.warning("Task %s already deleted before automation could remove it", task_id)

        updated_ids = []
        for task in result.updated_tasks:
            original = before_by_id.get(task.id)
            if original is None:
                continue
            changes = _task_changes(original, task)
            if not changes:
                continue
            try:
                await task_service.update_task(task_id=task.id, changes=changes)
                updated_ids.append(task.id)
            except RecordNotFoundError:
                logger.warning("Task %s disappeared before automation could update it", task.id)

        notifications = await notification_service.save_notifications(result.new_notifications)
        await rule_service.record_firings(rule_ids=result.fired_rule_ids, fired_at=clock())

        outcome = AutomationOutcome(
            trigger=trigger,
            updated_task_ids=updated_ids,
            deleted_task_ids=deleted_ids,
            notifications=notifications,
            fired_rule_ids=list(result.fired_rule_ids),
        )

        if outcome.changed_anything:
            log_with_context(
                logger,
                "info",
                "Applied automation result",
                trigger=trigger,
                fired_rule_ids=outcome.fired_rule_ids,
                updated_task_ids=updated_ids,
                deleted_task_ids=deleted_ids,
                notification_count=len(notifications),
            )
        return outcome


async def on_task_created(task: Task, *, clock: Clock = utc_now) -> AutomationOutcome:
    """Run ON_CREATE then KEYWORD_MATCH rules for a newly created task.

    The KEYWORD_MATCH pass is evaluated against the task collection produced by
    the ON_CREATE pass, and both passes are applied as one result.
    """
    async with _automation_lock:
        with span("automation_service.on_task_created"):
            tasks, rules = await _load_snapshot()
            created = evaluate(tasks, rules, TriggerType.ON_CREATE, task, clock=clock)
            matched = evaluate(created.updated_tasks, rules, TriggerType.KEYWORD_MATCH, task, clock=clock)
            return await apply_result(
                trigger=f"{TriggerType.ON_CREATE}+{TriggerType.KEYWORD_MATCH}",
                before=tasks,
                result=created.merge(matched),
                clock=clock,
            )


async def on_task_completed(task: Task, *, clock: Clock = utc_now) -> AutomationOutcome:
    """Run ON_COMPLETE rules for a task that just transitioned into completed."""
    async with _automation_lock:
        with span("automation_service.on_task_completed"):
            tasks, rules = await _load_snapshot()
            result = evaluate(tasks, rules, TriggerType.ON_COMPLETE, task, clock=clock)
            return await apply_result(trigger=str(TriggerType.ON_COMPLETE), before=tasks, result=result, clock=clock)


async def run_overdue_check(*, clock: Clock = utc_now) -> AutomationOutcome:
    """Run ON_OVERDUE rules against the whole task collection.

    Called by the scheduler on a fixed interval. Each call fires every matching
    rule at most once, however many tasks are overdue.
    """
    async with _automation_lock:
        with span("automation_service.run_overdue_check"):
            tasks, rules = await _load_snapshot()
            result = evaluate(tasks, rules, TriggerType.ON_OVERDUE, clock=clock)
            return await apply_result(trigger=str(TriggerType.ON_OVERDUE), before=tasks, result=result, clock=clock)
