# =============================================================================
# core/services/dashboard_service.py - Dashboard Aggregates
# =============================================================================

import logging

from core.models.common import DashboardSummary
from core.services.developer_service import DeveloperService
from core.services.project_service import ProjectService

logger = logging.getLogger(__name__)


class DashboardService:
    """Counts for the admin dashboard, read straight from the repositories."""

    def __init__(self, projects: ProjectService, developers: DeveloperService):
        self.projects = projects
        self.developers = developers

    def summary(self) -> DashboardSummary:
        summary = DashboardSummary(
            total_projects=self.projects.count(),
            active_projects=self.projects.count_active(),
            total_developers=self.developers.count(),
            active_developers=self.developers.count_active(),
        )
        logger.debug(f"Dashboard summary: {summary.model_dump()}")
        return summary
