"""FlowPilot - task management backend with user-defined automation rules."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from src.core.db_client import DatabaseError, close_connection, init_db
from src.core.errors import classify_error_with_response
from src.core.logging import configure_logfire, instrument_fastapi
from src.core.scheduler import TRACKED_JOBS, start_scheduler, stop_scheduler
from src.core.scheduler_tracker import job_tracker
from src.interface.automations_router import router as automations_router
from src.interface.notifications_router import router as notifications_router
from src.interface.stats_router import router as stats_router
from src.interface.tasks_router import router as tasks_router


logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan context manager."""
    # Startup
    # Configure logging first so startup logs are captured
    configure_logfire()

    await init_db()
    logger.info("Database initialized")

    start_scheduler()
    yield
    # Shutdown
    stop_scheduler()
    await close_connection()


app = FastAPI(
    title="flowpilot",
    description="Task management with user-defined automation rules",
    version="0.1.0",
    lifespan=lifespan,
)

# Instrument FastAPI with Logfire
instrument_fastapi(app)

# Register routers
app.include_router(tasks_router)
app.include_router(automations_router)
app.include_router(notifications_router)
app.include_router(stats_router)


@app.exception_handler(DatabaseError)
async def database_error_handler(request: Request, exc: DatabaseError) -> JSONResponse:
    """Turn storage errors (including missing records) into structured JSON errors."""
    response = classify_error_with_response(exc)
    if response.status_code >= 500:
        logger.error("request_failed", extra={"path": request.url.path, "error": str(exc)})
    return JSONResponse(content=response.model_dump(mode="json"), status_code=response.status_code)


@app.exception_handler(ValueError)
async def value_error_handler(request: Request, exc: ValueError) -> JSONResponse:
    """Turn service-level validation failures into 422 responses."""
    response = classify_error_with_response(exc)
    logger.warning("request_rejected", extra={"path": request.url.path, "error": str(exc)})
    return JSONResponse(content=response.model_dump(mode="json"), status_code=response.status_code)


@app.get("/health")
async def health_check() -> JSONResponse:
    """Health check endpoint."""
    return JSONResponse(content={"status": "healthy"}, status_code=200)


@app.get("/health/scheduler")
async def scheduler_health_check() -> JSONResponse:
    """Scheduler health check endpoint with job statuses."""
    job_statuses = {}
    for job_name in TRACKED_JOBS:
        job_statuses[job_name] = await job_tracker.get_job_status(job_name)

    # Get dead letter queue
    dlq = job_tracker.get_dead_letter_queue()

    # Determine overall health
    has_failures = any(status["consecutive_failures"] > 0 for status in job_statuses.values())

    overall_status = "degraded" if has_failures else "healthy"
    if len(dlq) > 0:
        overall_status = "critical"

    return JSONResponse(
        content={
            "status": overall_status,
            "jobs": job_statuses,
            "dead_letter_queue_size": len(dlq),
            "dead_letter_queue": dlq,
        },
        status_code=200 if overall_status == "healthy" else 503,
    )
