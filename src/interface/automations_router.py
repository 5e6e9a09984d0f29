"""Automation rule endpoints."""

from fastapi import APIRouter, Response, status

from src.domain.automation import AutomationRule
from src.domain.create_models import AutomationRuleCreate
from src.services import rule_service


router = APIRouter(prefix="/automations", tags=["automations"])


@router.get("", response_model=list[AutomationRule])
async def list_rules() -> list[AutomationRule]:
    """List rules in evaluation order (newest first)."""
    return await rule_service.list_rules()


@router.post("", response_model=AutomationRule, status_code=status.HTTP_201_CREATED)
async def create_rule(data: AutomationRuleCreate) -> AutomationRule:
    """Create a rule. Unsupported actions and incomplete conditions are rejected with 422."""
    return await rule_service.create_rule(data=data)


@router.post("/{rule_id}/toggle", response_model=AutomationRule)
async def toggle_rule(rule_id: str) -> AutomationRule:
    """Activate or deactivate a rule."""
    return await rule_service.toggle_rule(rule_id=rule_id)


@router.delete("/{rule_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_rule(rule_id: str) -> Response:
    """Delete a rule."""
    await rule_service.delete_rule(rule_id=rule_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
