# =============================================================================
# core/services/entity_service.py - Shared Repository Behaviour
# =============================================================================
# Behaviour common to the project and developer repositories:
# - slug resolution against the table's own rows
# - writes that survive a lost slug race (unique index backstop)
# - best-effort deletion of stored files, reported as warnings
# - pagination clamping, status flag reads/writes, counts
# =============================================================================

import logging
from typing import Any, Callable, Iterable

from app.exceptions import SlugConflictError
from core.services.storage_service import StorageService
from lib.file_sync import unique_refs
from lib.slugs import generate_unique_slug
from lib.supabase_client import UniqueViolationError
from lib.table_store import TableFilter, TableStore

logger = logging.getLogger(__name__)

# Write attempts when the slug unique index rejects a resolved slug
SLUG_WRITE_ATTEMPTS = 3


def _same_value(new: Any, old: Any) -> bool:
    if isinstance(new, list) and isinstance(old, list):
        if all(isinstance(item, str) for item in new + old):
            return set(new) == set(old)
        return new == old
    return new == old


class EntityService:
    """
    Base class for slugged, status-flagged entities with attached files.

    Subclasses set the table layout; the store and storage adapters are
    injected so tests can run against in-memory doubles.
    """

    table: str = ""
    columns: str = "*"
    status_column: str = "status"
    default_slug: str = "item"

    def __init__(
        self,
        store: TableStore | None = None,
        storage: StorageService | None = None,
        max_limit: int = 150,
    ):
        self.store = store or TableStore()
        self.storage = storage or StorageService()
        self.max_limit = max(1, max_limit)

    # -------------------------------------------------------------------------
    # Change detection
    # -------------------------------------------------------------------------

    @staticmethod
    def drop_unchanged(changes: dict[str, Any], current: dict[str, Any]) -> dict[str, Any]:
        """
        Keep only the columns whose new value differs from the stored row.

        Values are compared in their JSON form (dates as ISO strings).
        Reference lists compare as sets; other lists compare in order.
        """
        return {
            key: value
            for key, value in changes.items()
            if not _same_value(value, current.get(key))
        }

    # -------------------------------------------------------------------------
    # Slugs
    # -------------------------------------------------------------------------

    def slug_taken(self, candidate: str, exclude_id: str | None = None) -> bool:
        """Existence oracle: is `candidate` used by a row other than `exclude_id`?"""
        filters = TableFilter(equals={"slug": candidate})
        if exclude_id:
            filters.not_equals["id"] = exclude_id
        return self.store.exists(self.table, filters)

    def resolve_slug(self, proposed: str | None, exclude_id: str | None = None) -> str:
        """Resolve a collision-free slug within this table."""
        return generate_unique_slug(
            proposed,
            self.slug_taken,
            exclude_id=exclude_id,
            default_base=self.default_slug,
        )

    def _write_with_slug_retry(
        self,
        write: Callable[[dict[str, Any]], Any],
        row: dict[str, Any],
        proposed_slug: str | None = None,
        exclude_id: str | None = None,
    ) -> Any:
        """
        Run `write(row)`, re-resolving the slug when the unique index rejects it.

        The probe in resolve_slug() is check-then-act, so a concurrent writer
        can take the same slug first. Only slug conflicts are retried; if
        re-resolution yields the same slug the violation came from another
        column and is re-raised.

        Raises:
            SlugConflictError: If every attempt hits the unique index
            UniqueViolationError: For unique violations unrelated to the slug
        """
        for attempt in range(1, SLUG_WRITE_ATTEMPTS + 1):
            try:
                return write(row)
            except UniqueViolationError:
                if "slug" not in row:
                    raise
                if attempt == SLUG_WRITE_ATTEMPTS:
                    raise SlugConflictError(row["slug"], attempt)

                retry_slug = self.resolve_slug(proposed_slug, exclude_id=exclude_id)
                if retry_slug == row["slug"]:
                    raise
                logger.warning(
                    f"Slug '{row['slug']}' taken concurrently in {self.table}, "
                    f"retrying with '{retry_slug}' (attempt {attempt + 1})"
                )
                row = {**row, "slug": retry_slug}

    # -------------------------------------------------------------------------
    # Files
    # -------------------------------------------------------------------------

    def _delete_files(
        self,
        bucket: str,
        urls: Iterable[str | None],
    ) -> tuple[list[str], list[str]]:
        """
        Submit stored files for deletion without failing the caller.

        Returns:
            (submitted urls, warnings for files that could not be deleted)
        """
        submitted = unique_refs(urls)
        if not submitted:
            return [], []

        try:
            outcomes = self.storage.delete_by_urls(bucket, submitted)
        except Exception as e:
            logger.warning(f"File cleanup failed for {len(submitted)} file(s) in {bucket}: {e}")
            return submitted, [f"File cleanup failed: {e}"]

        warnings = [
            f"Could not delete file {outcome.url}: {outcome.error}"
            for outcome in outcomes
            if not outcome.deleted
        ]
        for warning in warnings:
            logger.warning(warning)
        return submitted, warnings

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def page_window(self, page: int, limit: int) -> tuple[int, int, int]:
        """
        Clamp pagination input.

        Returns:
            (page >= 1, 1 <= limit <= max_limit, zero-based offset)
        """
        page = max(1, int(page))
        limit = min(self.max_limit, max(1, int(limit)))
        return page, limit, (page - 1) * limit

    def get_by_id(self, entity_id: str) -> dict[str, Any] | None:
        """Fetch one row, or None if it doesn't exist."""
        return self.store.fetch_row(self.table, entity_id, columns=self.columns)

    def get_by_slug(self, slug: str, active_only: bool = False) -> dict[str, Any] | None:
        """Fetch one row by slug, optionally only if it is active."""
        filters = TableFilter(equals={"slug": slug})
        if active_only:
            filters.equals[self.status_column] = True
        rows = self.store.fetch_rows(
            self.table,
            filters,
            columns=self.columns,
            order_by=None,
            limit=1,
        )
        return rows[0] if rows else None

    def count(self) -> int:
        """Total number of rows."""
        return self.store.count_rows(self.table)

    def count_active(self) -> int:
        """Number of rows whose status flag is set."""
        return self.store.count_rows(
            self.table,
            TableFilter(equals={self.status_column: True}),
        )

    # -------------------------------------------------------------------------
    # Status
    # -------------------------------------------------------------------------

    def set_status(self, entity_id: str, value: bool) -> dict[str, Any] | None:
        """
        Set the status flag directly.

        Idempotent and safe under concurrent callers.

        Returns:
            Updated row, or None if it doesn't exist
        """
        updated = self.store.update_row(
            self.table,
            entity_id,
            {self.status_column: bool(value)},
        )
        if updated is not None:
            logger.info(f"Set {self.table} {entity_id} {self.status_column}={bool(value)}")
        return updated

    def toggle_status(self, entity_id: str) -> dict[str, Any] | None:
        """
        Flip the status flag.

        Read-then-write: two concurrent toggles can both read the same value
        and one flip is lost. Prefer set_status() for new callers.

        Returns:
            Updated row, or None if it doesn't exist
        """
        current = self.store.fetch_row(
            self.table,
            entity_id,
            columns=f"id, {self.status_column}",
        )
        if current is None:
            return None
        return self.set_status(entity_id, not bool(current.get(self.status_column)))
