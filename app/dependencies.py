# =============================================================================
# app/dependencies.py - Shared Dependencies
# =============================================================================
# FastAPI dependency injection for the repositories and storage adapter.
# These are injected into route handlers using Depends(); tests replace
# them through app.dependency_overrides.
# =============================================================================

from typing import Annotated

from fastapi import Depends

from app.config import settings
from core.services.dashboard_service import DashboardService
from core.services.developer_service import DeveloperService
from core.services.project_service import ProjectService
from core.services.storage_service import StorageService
from lib.table_store import TableStore


def get_table_store() -> TableStore:
    """Relational store backed by the shared Supabase client."""
    return TableStore()


def get_storage_service() -> StorageService:
    """Blob store backed by the shared Supabase client."""
    return StorageService()


def get_project_service(
    store: Annotated[TableStore, Depends(get_table_store)],
    storage: Annotated[StorageService, Depends(get_storage_service)],
) -> ProjectService:
    return ProjectService(
        store=store,
        storage=storage,
        config=settings.project_storage,
        max_limit=settings.PROJECT_LIST_MAX_LIMIT,
    )


def get_developer_service(
    store: Annotated[TableStore, Depends(get_table_store)],
    storage: Annotated[StorageService, Depends(get_storage_service)],
) -> DeveloperService:
    return DeveloperService(
        store=store,
        storage=storage,
        config=settings.developer_storage,
        max_limit=settings.DEVELOPER_LIST_MAX_LIMIT,
    )


def get_dashboard_service(
    projects: Annotated[ProjectService, Depends(get_project_service)],
    developers: Annotated[DeveloperService, Depends(get_developer_service)],
) -> DashboardService:
    return DashboardService(projects=projects, developers=developers)


# Type aliases for dependency injection
StorageDep = Annotated[StorageService, Depends(get_storage_service)]
ProjectServiceDep = Annotated[ProjectService, Depends(get_project_service)]
DeveloperServiceDep = Annotated[DeveloperService, Depends(get_developer_service)]
DashboardServiceDep = Annotated[DashboardService, Depends(get_dashboard_service)]
