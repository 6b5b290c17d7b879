# =============================================================================
# core/services/project_service.py - Project Repository
# =============================================================================
# Create/update/delete of real-estate projects, keeping the files in storage
# in step with the row:
# - hero_image:  0..1 reference (removal flag wins over a replacement)
# - images:      duplicate-free gallery references
# - documents:   duplicate-free document references
#
# New files are uploaded by the caller before insert/update; this service
# only decides which stored files became orphans and deletes them after the
# row write. Deletion failures never fail the operation.
# =============================================================================

from __future__ import annotations

import logging
from typing import Any, Iterable

from app.exceptions import InvalidPayloadError
from core.models.common import (
    DeleteResult,
    ListResult,
    MutationResult,
    ProjectStorageConfig,
)
from core.models.project import ProjectCreate, ProjectUpdate
from core.services.entity_service import EntityService
from core.services.storage_service import StorageService
from lib.file_sync import reconcile, reconcile_single, unique_refs
from lib.normalize import normalize_amenities
from lib.table_store import TableFilter, TableStore

logger = logging.getLogger(__name__)

PROJECT_COLUMNS = (
    "id, title, slug, description, category_id, location, "
    "start_date, end_date, status, amenities, meta, "
    "hero_image, images, documents, created_at, updated_at"
)

# Array columns holding storage references
FILE_SET_COLUMNS = ("images", "documents")


class ProjectService(EntityService):
    """
    Repository for the `projects` table and its stored files.

    Example:
        service = ProjectService(config=settings.project_storage)
        result = service.insert(ProjectCreate(title="Lake View"))
        result.record["slug"]  # "lake-view"
    """

    table = "projects"
    columns = PROJECT_COLUMNS
    status_column = "status"
    default_slug = "project"

    def __init__(
        self,
        store: TableStore | None = None,
        storage: StorageService | None = None,
        config: ProjectStorageConfig | None = None,
        max_limit: int = 150,
    ):
        super().__init__(store=store, storage=storage, max_limit=max_limit)
        self.config = config or ProjectStorageConfig()

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def list(
        self,
        title: str = "",
        status: bool | None = None,
        page: int = 1,
        limit: int = 20,
    ) -> ListResult:
        """
        List projects, newest first.

        Args:
            title: Case-insensitive substring of the title
            status: Only active (True) or inactive (False) projects
            page: 1-indexed page (clamped to >= 1)
            limit: Page size (clamped to 1..max_limit)
        """
        page, limit, offset = self.page_window(page, limit)

        filters = TableFilter()
        if title:
            filters.contains["title"] = title
        if status is not None:
            filters.equals["status"] = status

        total = self.store.count_rows(self.table, filters)
        rows = self.store.fetch_rows(
            self.table,
            filters,
            columns=self.columns,
            offset=offset,
            limit=limit,
        )
        return ListResult(rows=rows, total=total, page=page, limit=limit)

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    def insert(self, payload: ProjectCreate) -> MutationResult:
        """
        Create a project.

        The slug comes from `payload.slug` when given, else from the title,
        and is made unique among projects. Amenities are coerced to
        {title, description, imageUrl}; duplicate file references are dropped.

        Raises:
            InvalidPayloadError: If amenities are malformed
            SlugConflictError: If the slug keeps colliding on write
            SupabaseClientError: If the store fails
        """
        row = payload.model_dump(mode="json")
        row["amenities"] = self._normalize_amenities(row["amenities"])
        for column in FILE_SET_COLUMNS:
            row[column] = unique_refs(row[column])

        proposed_slug = payload.slug or payload.title
        row["slug"] = self.resolve_slug(proposed_slug)

        created = self._write_with_slug_retry(
            lambda r: self.store.insert_row(self.table, r),
            row,
            proposed_slug,
        )
        logger.info(f"Created project {created.get('id')} with slug '{created.get('slug')}'")
        return MutationResult(record=created)

    def update(
        self,
        project_id: str,
        patch: ProjectUpdate,
        append_images: Iterable[str] = (),
        append_documents: Iterable[str] = (),
    ) -> MutationResult | None:
        """
        Apply a partial update.

        Only explicitly set fields change; null is ignored except for
        `hero_image`, where it clears the image. `append_images` /
        `append_documents` are unioned with the desired lists (the patch's
        lists when given, else the stored ones). Files no longer referenced
        are deleted from storage after the row is written.

        The slug is re-resolved only when `patch.slug` is set; renaming the
        title keeps the existing slug.

        Returns:
            MutationResult, or None if the project doesn't exist. A patch
            with nothing to change returns the stored row without writing.

        Raises:
            InvalidPayloadError: If amenities are malformed
            SlugConflictError: If the slug keeps colliding on write
            SupabaseClientError: If the store fails
        """
        current = self.get_by_id(project_id)
        if current is None:
            return None

        changes = {
            key: value
            for key, value in patch.model_dump(
                mode="json",
                exclude_unset=True,
                exclude={"remove_hero"},
            ).items()
            if value is not None
        }
        orphaned: list[str] = []

        # Hero image (0..1)
        clear_hero = patch.remove_hero or (
            "hero_image" in patch.model_fields_set and patch.hero_image is None
        )
        hero = reconcile_single(
            current.get("hero_image"),
            changes.pop("hero_image", None),
            remove=clear_hero,
        )
        if hero.changed:
            changes["hero_image"] = hero.value
        orphaned.extend(hero.to_delete)

        # Gallery images and documents
        appended = {
            "images": list(append_images or []),
            "documents": list(append_documents or []),
        }
        for column in FILE_SET_COLUMNS:
            if column not in changes and not appended[column]:
                continue
            stored = current.get(column) or []
            desired = changes.get(column, stored) + appended[column]
            result = reconcile(stored, desired)
            changes[column] = result.to_keep
            orphaned.extend(result.to_delete)

        if "amenities" in changes:
            changes["amenities"] = self._normalize_amenities(changes["amenities"])

        proposed_slug = None
        if "slug" in changes:
            proposed_slug = changes["slug"] or changes.get("title") or current.get("title")
            changes["slug"] = self.resolve_slug(proposed_slug, exclude_id=project_id)

        changes = self.drop_unchanged(changes, current)
        if changes:
            updated = self._write_with_slug_retry(
                lambda r: self.store.update_row(self.table, project_id, r),
                changes,
                proposed_slug,
                exclude_id=project_id,
            )
            if updated is None:
                return None
            logger.info(f"Updated project {project_id}: {sorted(changes)}")
        else:
            updated = current

        deleted_files, warnings = self._delete_files(self.config.bucket, orphaned)
        return MutationResult(
            record=updated,
            warnings=warnings,
            deleted_files=deleted_files,
        )

    def remove(self, project_id: str) -> DeleteResult | None:
        """
        Delete a project and every file it references.

        Files are submitted for deletion first (best-effort); the row is
        deleted regardless of the outcome.

        Returns:
            DeleteResult, or None if the project doesn't exist
        """
        current = self.get_by_id(project_id)
        if current is None:
            return None

        deleted_files, warnings = self._delete_files(
            self.config.bucket,
            self.file_refs(current),
        )
        deleted = self.store.delete_row(self.table, project_id)
        logger.info(
            f"Deleted project {project_id} (row deleted: {deleted}, "
            f"files submitted: {len(deleted_files)})"
        )
        return DeleteResult(
            id=str(project_id),
            deleted=deleted,
            deleted_files=len(deleted_files),
            warnings=warnings,
        )

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    @staticmethod
    def file_refs(project: dict[str, Any]) -> list[str]:
        """Every storage reference held by a project row."""
        return unique_refs([
            project.get("hero_image"),
            *(project.get("images") or []),
            *(project.get("documents") or []),
        ])

    @staticmethod
    def _normalize_amenities(items: Any) -> list[dict[str, str]]:
        try:
            return normalize_amenities(items)
        except ValueError as e:
            raise InvalidPayloadError("amenities", str(e))
