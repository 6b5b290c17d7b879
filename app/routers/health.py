# =============================================================================
# app/routers/health.py - Health Check Endpoints
# =============================================================================
# Health checks for monitoring and load balancers. Readiness probes the two
# tables the repositories depend on and the configured storage buckets.
# =============================================================================

import logging
from datetime import datetime, timezone

from fastapi import APIRouter
from pydantic import BaseModel

from app import __version__
from app.config import settings
from lib.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)

router = APIRouter()

# Tables that must be reachable before the API can serve writes
REQUIRED_TABLES = ("projects", "developers")


# =============================================================================
# Response Models
# =============================================================================

class HealthResponse(BaseModel):
    """Basic health check response."""
    status: str
    timestamp: str
    environment: str
    version: str


class ChecksResponse(BaseModel):
    """Per-dependency check results ("healthy" or "unhealthy: <reason>")."""
    database: str
    storage: str


class ReadinessResponse(BaseModel):
    """Readiness check response."""
    status: str
    checks: ChecksResponse
    timestamp: str


class LivenessResponse(BaseModel):
    """Liveness check response."""
    status: str
    timestamp: str


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _failure(error: Exception) -> str:
    return f"unhealthy: {str(error)[:80]}"


# =============================================================================
# Endpoints
# =============================================================================

@router.get("/health", response_model=HealthResponse)
async def health_check():
    """Basic health status for load balancers and monitoring."""
    return HealthResponse(
        status="healthy",
        timestamp=_now(),
        environment=settings.ENVIRONMENT,
        version=__version__,
    )


@router.get("/health/ready", response_model=ReadinessResponse)
async def readiness_check():
    """
    Readiness check.

    - database: `projects` and `developers` answer a one-row select
    - storage: the project and developer buckets exist
    """
    checks = ChecksResponse(database="unknown", storage="unknown")

    try:
        client = SupabaseClient.get_client()
        for table in REQUIRED_TABLES:
            client.table(table).select("id").limit(1).execute()
        checks.database = "healthy"
    except Exception as e:
        logger.warning(f"Readiness: database check failed: {e}")
        checks.database = _failure(e)

    try:
        client = SupabaseClient.get_client()
        for bucket in {settings.PROJECT_BUCKET, settings.DEVELOPER_BUCKET}:
            client.storage.get_bucket(bucket)
        checks.storage = "healthy"
    except Exception as e:
        logger.warning(f"Readiness: storage check failed: {e}")
        checks.storage = _failure(e)

    all_healthy = checks.database == "healthy" and checks.storage == "healthy"

    return ReadinessResponse(
        status="ready" if all_healthy else "degraded",
        checks=checks,
        timestamp=_now(),
    )


@router.get("/health/live", response_model=LivenessResponse)
async def liveness_check():
    """Whether the process is alive (restart decisions)."""
    return LivenessResponse(status="alive", timestamp=_now())
