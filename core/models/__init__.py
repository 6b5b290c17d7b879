# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# This package contains Pydantic schemas for data validation:
# - common.py: Storage configuration, write/list results, dashboard counts
# - project.py: Project create/update schemas
# - developer.py: Developer create/update schemas
#
# These models define the "contract" between API and repositories.
# =============================================================================

from .common import (
    DashboardSummary,
    DeleteResult,
    DeveloperStorageConfig,
    ListResult,
    MutationResult,
    ProjectStorageConfig,
)
from .developer import DeveloperCreate, DeveloperUpdate
from .project import ProjectCreate, ProjectUpdate

__all__ = [
    # Common
    "DashboardSummary",
    "DeleteResult",
    "DeveloperStorageConfig",
    "ListResult",
    "MutationResult",
    "ProjectStorageConfig",
    # Project
    "ProjectCreate",
    "ProjectUpdate",
    # Developer
    "DeveloperCreate",
    "DeveloperUpdate",
]
