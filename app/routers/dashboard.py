# =============================================================================
# app/routers/dashboard.py - Admin Dashboard Endpoints
# =============================================================================

from fastapi import APIRouter

from app.dependencies import DashboardServiceDep
from core.models.common import DashboardSummary

router = APIRouter()


@router.get("/summary", response_model=DashboardSummary)
async def dashboard_summary(service: DashboardServiceDep):
    """Project and developer counts for the admin dashboard."""
    return service.summary()
