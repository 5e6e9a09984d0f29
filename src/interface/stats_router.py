"""Dashboard statistics endpoint."""

from fastapi import APIRouter

from src.models.service_models import UserStats
from src.services import analytics_service


router = APIRouter(prefix="/stats", tags=["stats"])


@router.get("", response_model=UserStats)
async def get_stats() -> UserStats:
    """Pending, completed-today, high-priority and overdue task counts."""
    return await analytics_service.get_user_stats()
