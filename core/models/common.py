# =============================================================================
# core/models/common.py - Shared Schemas
# =============================================================================
# Types shared by the project and developer repositories:
# - ProjectStorageConfig / DeveloperStorageConfig: where files live
# - ListResult: one page of rows plus the unpaginated total
# - MutationResult / DeleteResult: write outcomes with non-fatal warnings
# =============================================================================

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ProjectStorageConfig(BaseModel):
    """Bucket and folders used for project files."""

    model_config = ConfigDict(frozen=True)

    bucket: str = Field(default="project-files", min_length=1)
    hero_folder: str = Field(default="hero-images", min_length=1)
    images_folder: str = Field(default="project-images", min_length=1)
    documents_folder: str = Field(default="project-documents", min_length=1)


class DeveloperStorageConfig(BaseModel):
    """Bucket and folder used for developer logos."""

    model_config = ConfigDict(frozen=True)

    bucket: str = Field(default="developer-images", min_length=1)
    logo_folder: str = Field(default="developers", min_length=1)


class ListResult(BaseModel):
    """
    One page of a filtered listing.

    `total` counts every row matching the filters, independent of the
    page window.
    """

    rows: list[dict[str, Any]] = Field(default_factory=list)
    total: int = Field(default=0, ge=0)
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=20, ge=1)


class MutationResult(BaseModel):
    """
    Outcome of an insert or update.

    The primary row write succeeded. `warnings` lists secondary steps that
    failed without undoing it (city links, blob cleanup); `deleted_files`
    lists references submitted for deletion.
    """

    record: dict[str, Any]
    warnings: list[str] = Field(default_factory=list)
    deleted_files: list[str] = Field(default_factory=list)


class DeleteResult(BaseModel):
    """Outcome of removing an entity and its files."""

    id: str
    deleted: bool
    deleted_files: int = Field(default=0, ge=0)
    warnings: list[str] = Field(default_factory=list)


class DashboardSummary(BaseModel):
    """Aggregate counts shown on the admin dashboard."""

    total_projects: int = Field(default=0, ge=0)
    active_projects: int = Field(default=0, ge=0)
    total_developers: int = Field(default=0, ge=0)
    active_developers: int = Field(default=0, ge=0)
