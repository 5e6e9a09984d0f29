"""Task endpoints; creation and completion run the automation passes."""

import logging

from fastapi import APIRouter, HTTPException, Query, Response, status
from pydantic import BaseModel

from src.domain.create_models import TaskCreate
from src.domain.task import Task, TaskStatus
from src.domain.update_models import TaskUpdate
from src.models.service_models import AutomationOutcome
from src.services import automation_service, task_service


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tasks", tags=["tasks"])


class TaskWithAutomation(BaseModel):
    """A written task together with the automation work it triggered.

    `task` is None when an automation rule deleted the task it was fired for.
    """

    task: Task | None
    automation: AutomationOutcome | None = None


@router.get("", response_model=list[Task])
async def list_tasks(task_status: TaskStatus | None = Query(default=None, alias="status")) -> list[Task]:
    """List tasks, newest first, optionally filtered by status."""
    return await task_service.list_tasks(status=task_status)


@router.post("", response_model=TaskWithAutomation, status_code=status.HTTP_201_CREATED)
async def create_task(data: TaskCreate) -> TaskWithAutomation:
    """Create a task, then run ON_CREATE and KEYWORD_MATCH rules against it."""
    task = await task_service.create_task(data=data)
    outcome = await automation_service.on_task_created(task)

    if task.id in outcome.deleted_task_ids:
        logger.info("Task %s was removed by automation right after creation", task.id)
        return TaskWithAutomation(task=None, automation=outcome)

    if task.id in outcome.updated_task_ids:
        task = await task_service.get_task(task_id=task.id)
    return TaskWithAutomation(task=task, automation=outcome)


@router.get("/{task_id}", response_model=Task)
async def get_task(task_id: str) -> Task:
    """Fetch a single task."""
    return await task_service.get_task(task_id=task_id)


@router.patch("/{task_id}", response_model=TaskWithAutomation)
async def update_task(task_id: str, data: TaskUpdate) -> TaskWithAutomation:
    """Apply a partial update; a transition into completed runs ON_COMPLETE rules."""
    changes = data.changes()
    if not changes:
        raise HTTPException(status_code=422, detail="No fields to update")

    before = await task_service.get_task(task_id=task_id)
    task = await task_service.update_task(task_id=task_id, changes=changes)

    if before.is_completed or not task.is_completed:
        return TaskWithAutomation(task=task)

    outcome = await automation_service.on_task_completed(task)
    if task.id in outcome.deleted_task_ids:
        return TaskWithAutomation(task=None, automation=outcome)
    if task.id in outcome.updated_task_ids:
        task = await task_service.get_task(task_id=task.id)
    return TaskWithAutomation(task=task, automation=outcome)


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_task(task_id: str) -> Response:
    """Delete a task."""
    await task_service.delete_task(task_id=task_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
