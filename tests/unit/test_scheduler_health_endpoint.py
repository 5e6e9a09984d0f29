"""Tests for health check endpoints and the overdue scheduler job."""

from unittest.mock import AsyncMock, patch

import pytest
from fastapi.testclient import TestClient

from src.core import scheduler
from src.core.config import constants
from src.main import app
from src.models.service_models import AutomationOutcome


@pytest.fixture
def client() -> TestClient:
    """Create a test client for FastAPI app."""
    return TestClient(app)


def job_status(consecutive_failures: int = 0) -> dict:
    return {
        "job_name": constants.OVERDUE_JOB_ID,
        "last_success": "2025-01-01T00:00:00Z",
        "last_failure": None,
        "last_error": None,
        "consecutive_failures": consecutive_failures,
        "success_count": 10,
        "failure_count": 0,
        "currently_running": False,
        "current_run_started": None,
    }


@pytest.mark.unit
def test_health_endpoint_returns_healthy(client: TestClient) -> None:
    """Test that health endpoint returns healthy status."""
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


@pytest.mark.unit
def test_scheduler_health_all_jobs_healthy(client: TestClient) -> None:
    """Test scheduler health endpoint when all jobs are healthy."""
    with patch("src.main.job_tracker") as mock_tracker:
        mock_tracker.get_job_status = AsyncMock(return_value=job_status())
        mock_tracker.get_dead_letter_queue = lambda: []

        response = client.get("/health/scheduler")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert list(data["jobs"]) == [constants.OVERDUE_JOB_ID]
    assert data["dead_letter_queue_size"] == 0


@pytest.mark.unit
def test_scheduler_health_degraded_with_failures(client: TestClient) -> None:
    """Test scheduler health endpoint when jobs have failures."""
    with patch("src.main.job_tracker") as mock_tracker:
        mock_tracker.get_job_status = AsyncMock(return_value=job_status(consecutive_failures=2))
        mock_tracker.get_dead_letter_queue = lambda: []

        response = client.get("/health/scheduler")

    assert response.status_code == 503
    assert response.json()["status"] == "degraded"


@pytest.mark.unit
def test_scheduler_health_critical_with_dead_letters(client: TestClient) -> None:
    """Test scheduler health endpoint when the dead letter queue is not empty."""
    dlq = [{"job_name": constants.OVERDUE_JOB_ID, "error": "down", "context": "Failed 3 consecutive times"}]
    with patch("src.main.job_tracker") as mock_tracker:
        mock_tracker.get_job_status = AsyncMock(return_value=job_status(consecutive_failures=3))
        mock_tracker.get_dead_letter_queue = lambda: dlq

        response = client.get("/health/scheduler")

    assert response.status_code == 503
    assert response.json()["status"] == "critical"
    assert response.json()["dead_letter_queue"] == dlq


@pytest.mark.unit
async def test_overdue_job_calls_coordinator() -> None:
    """Test the scheduled job delegates to the overdue automation pass."""
    outcome = AutomationOutcome(trigger="ON_OVERDUE", fired_rule_ids=["r1"])
    with patch("src.core.scheduler.automation_service.run_overdue_check", new=AsyncMock(return_value=outcome)) as run:
        await scheduler.run_overdue_automations()

    run.assert_awaited_once()


@pytest.mark.unit
async def test_overdue_job_propagates_errors() -> None:
    """Test failures reach the retry wrapper instead of being swallowed."""
    with (
        patch(
            "src.core.scheduler.automation_service.run_overdue_check",
            new=AsyncMock(side_effect=RuntimeError("db locked")),
        ),
        pytest.raises(RuntimeError),
    ):
        await scheduler.run_overdue_automations()


@pytest.mark.unit
def test_start_scheduler_respects_setting() -> None:
    """Test the scheduler is not started when disabled."""
    with patch.object(scheduler, "scheduler") as mock_scheduler:
        scheduler.start_scheduler()

    mock_scheduler.add_job.assert_not_called()
    mock_scheduler.start.assert_not_called()


@pytest.mark.unit
def test_start_scheduler_registers_overdue_job(monkeypatch) -> None:
    """Test the overdue job is registered with an interval trigger."""
    monkeypatch.setattr(scheduler.settings, "enable_scheduler", True)
    monkeypatch.setattr(scheduler.settings, "overdue_check_interval_seconds", 30)

    with patch.object(scheduler, "scheduler") as mock_scheduler:
        scheduler.start_scheduler()

    kwargs = mock_scheduler.add_job.call_args.kwargs
    assert kwargs["id"] == constants.OVERDUE_JOB_ID
    assert kwargs["trigger"].interval.total_seconds() == 30
    mock_scheduler.start.assert_called_once()
