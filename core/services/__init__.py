# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================

from .dashboard_service import DashboardService
from .developer_service import DeveloperService
from .entity_service import EntityService
from .project_service import ProjectService
from .storage_service import BlobDeleteOutcome, StorageService, UploadedFile

__all__ = [
    "BlobDeleteOutcome",
    "DashboardService",
    "DeveloperService",
    "EntityService",
    "ProjectService",
    "StorageService",
    "UploadedFile",
]
