"""
Sov Portal API - Main Application Entry Point

This module initializes and configures the FastAPI application including:
- Database and Redis connections
- Background job scheduler
- CORS middleware
- API routing
- Health check endpoints
"""

import logging
from contextlib import asynccontextmanager

from fastapi import APIRouter, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text

from app.api import api_router
from app.core import redis as redis_module
from app.core.config import settings
from app.core.database import async_session_maker, close_db, init_db
from app.core.redis import close_redis, init_redis
from app.core.scheduler import (
    list_registered_jobs,
    pause_job,
    resume_job,
    start_scheduler,
    stop_scheduler,
    trigger_job_manually,
)
from app.modules.identifiers import register_identifier_jobs

logging.basicConfig(
    level=logging.DEBUG if settings.is_development else logging.INFO,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """
    Application lifespan manager.

    Handles startup and shutdown events including:
    - Redis connection (rate limiting falls back to memory without it)
    - Database connection
    - Background job scheduler
    """
    logger.info(f"Starting Sov Portal API in {settings.python_env} mode...")

    try:
        await init_redis()
    except Exception as e:
        logger.error(f"Redis connection failed: {e}")
        if settings.is_production:
            raise

    try:
        await init_db()
        logger.info("Database connected")
    except Exception as e:
        logger.error(f"Database connection failed: {e}")
        if settings.is_production:
            raise

    try:
        # Register jobs before starting the scheduler
        register_identifier_jobs()
        await start_scheduler()
    except Exception as e:
        logger.error(f"Background scheduler failed to start: {e}")
        if settings.is_production:
            raise

    yield  # Application runs here

    logger.info("Shutting down Sov Portal API...")

    # Stop the scheduler first (wait for running jobs)
    await stop_scheduler()
    await close_redis()
    await close_db()
    logger.info("Cleanup complete")


app = FastAPI(
    title="Sov Portal API",
    description="Study abroad application and visa workflow API for admins, agents and students",
    version="0.1.0",
    docs_url="/docs" if settings.is_development else None,
    redoc_url="/redoc" if settings.is_development else None,
    lifespan=lifespan,
)

app.include_router(api_router, prefix="/api/v1")

# CORS configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/", tags=["Root"])
async def root() -> dict[str, str]:
    """Root endpoint - API welcome message."""
    return {
        "message": "Welcome to Sov Portal API",
        "status": "running",
        "environment": settings.python_env,
    }


@app.get("/health", tags=["Health"])
async def health_check() -> dict[str, str]:
    """Health check endpoint for container orchestration."""
    return {"status": "healthy"}


@app.get("/ready", tags=["Health"])
async def readiness_check() -> dict[str, str]:
    """Readiness check endpoint."""
    return {"status": "ready"}


# ============================================
# Debug Endpoints (development only)
# ============================================
# Connection checks and manual control of background jobs. In production,
# jobs run automatically on schedule.

debug_router = APIRouter(prefix="/debug", tags=["Debug"])


@debug_router.get("/db")
async def debug_db():
    """Test database connection."""
    try:
        async with async_session_maker() as session:
            result = await session.execute(text("SELECT 1"))
            return {"database": "connected", "result": result.scalar()}
    except Exception as e:
        return {"database": "error", "message": str(e)}


@debug_router.get("/redis")
async def debug_redis():
    """Test Redis connection."""
    client = redis_module.redis_client
    try:
        if client:
            await client.ping()
            return {"redis": "connected"}
        return {"redis": "not initialized"}
    except Exception as e:
        return {"redis": "error", "message": str(e)}


@debug_router.get("/jobs")
async def list_jobs():
    """List all registered background jobs with next run time and pause status."""
    return {"jobs": list_registered_jobs()}


@debug_router.post("/jobs/{job_id}/trigger")
async def trigger_job(job_id: str):
    """
    Manually trigger a background job.

    Args:
        job_id: The ID of the job to trigger. Available jobs:
            - identifiers_prune_sequence_counters

    Raises:
        HTTPException 400: If job_id is not found.
    """
    try:
        return await trigger_job_manually(job_id)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e


@debug_router.post("/jobs/{job_id}/pause")
async def pause_job_endpoint(job_id: str):
    """Pause a scheduled job. Use /debug/jobs/{job_id}/resume to restart it."""
    return {"job_id": job_id, "paused": pause_job(job_id)}


@debug_router.post("/jobs/{job_id}/resume")
async def resume_job_endpoint(job_id: str):
    """Resume a paused background job."""
    return {"job_id": job_id, "resumed": resume_job(job_id)}


if settings.is_development:
    app.include_router(debug_router)
