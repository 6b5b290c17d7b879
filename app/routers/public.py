# =============================================================================
# app/routers/public.py - Public Read Endpoints
# =============================================================================
# Read-only views used by the public website. Only active projects and
# developers are visible, and entities are addressed by slug.
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Path, Query

from app.config import settings
from app.dependencies import DeveloperServiceDep, ProjectServiceDep
from app.exceptions import DeveloperNotFoundError, ProjectNotFoundError
from core.models.common import ListResult

router = APIRouter()


@router.get("/projects", response_model=ListResult)
async def list_public_projects(
    service: ProjectServiceDep,
    title: Annotated[str, Query()] = "",
    page: Annotated[int, Query()] = 1,
    limit: Annotated[int, Query()] = settings.DEFAULT_PAGE_SIZE,
):
    """List active projects."""
    return service.list(title=title, status=True, page=page, limit=limit)


@router.get("/projects/{slug}")
async def get_public_project(
    slug: Annotated[str, Path(description="Project slug")],
    service: ProjectServiceDep,
):
    """Get an active project by slug."""
    project = service.get_by_slug(slug, active_only=True)
    if project is None:
        raise ProjectNotFoundError(slug)
    return project


@router.get("/developers", response_model=ListResult)
async def list_public_developers(
    service: DeveloperServiceDep,
    name: Annotated[str, Query()] = "",
    city: Annotated[str, Query()] = "",
    page: Annotated[int, Query()] = 1,
    limit: Annotated[int, Query()] = settings.DEFAULT_PAGE_SIZE,
):
    """List active developers."""
    return service.list(
        name=name,
        city=city,
        active=True,
        page=page,
        limit=limit,
    )


@router.get("/developers/{slug}")
async def get_public_developer(
    slug: Annotated[str, Path(description="Developer slug")],
    service: DeveloperServiceDep,
):
    """Get an active developer by slug."""
    developer = service.get_by_slug(slug, active_only=True)
    if developer is None:
        raise DeveloperNotFoundError(slug)
    return developer
