# =============================================================================
# core/services/developer_service.py - Developer Repository
# =============================================================================
# Create/update/delete of developers (real-estate companies).
#
# Writes are two-phase:
# 1. the `developers` row (must succeed)
# 2. city links in `developer_cities` (failures are returned as warnings)
#
# The logo is a single storage reference reconciled like a project's hero
# image: removal wins over a replacement, the superseded file is deleted.
# =============================================================================

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Any

from core.models.common import (
    DeleteResult,
    DeveloperStorageConfig,
    ListResult,
    MutationResult,
)
from core.models.developer import DeveloperCreate, DeveloperUpdate
from core.services.entity_service import EntityService
from core.services.storage_service import StorageService
from lib.file_sync import reconcile_single
from lib.normalize import normalize_labels
from lib.supabase_client import SupabaseClientError
from lib.table_store import TableFilter, TableStore

logger = logging.getLogger(__name__)

CITY_TABLE = "developer_cities"

DEVELOPER_COLUMNS = (
    "id, name, slug, email, phone, website, about, country, "
    "active, logo_url, created_at, updated_at"
)


class DeveloperService(EntityService):
    """
    Repository for the `developers` table, its city links and logo file.

    Example:
        service = DeveloperService(config=settings.developer_storage)
        result = service.insert(DeveloperCreate(name="Emaar", cities=["Dubai"]))
        result.warnings  # [] unless linking cities failed
    """

    table = "developers"
    columns = DEVELOPER_COLUMNS
    status_column = "active"
    default_slug = "developer"

    def __init__(
        self,
        store: TableStore | None = None,
        storage: StorageService | None = None,
        config: DeveloperStorageConfig | None = None,
        max_limit: int = 150,
    ):
        super().__init__(store=store, storage=storage, max_limit=max_limit)
        self.config = config or DeveloperStorageConfig()

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def list(
        self,
        name: str = "",
        city: str = "",
        active: bool | None = None,
        page: int = 1,
        limit: int = 20,
    ) -> ListResult:
        """
        List developers, newest first, each with its `cities`.

        Args:
            name: Case-insensitive substring of the name
            city: Case-insensitive substring of a linked city
            active: Only active (True) or inactive (False) developers
            page: 1-indexed page (clamped to >= 1)
            limit: Page size (clamped to 1..max_limit)
        """
        page, limit, offset = self.page_window(page, limit)

        filters = TableFilter()
        if name:
            filters.contains["name"] = name
        if active is not None:
            filters.equals["active"] = active

        if city:
            links = self.store.fetch_rows(
                CITY_TABLE,
                TableFilter(contains={"city": city}),
                columns="developer_id",
                order_by=None,
            )
            developer_ids = list(dict.fromkeys(link["developer_id"] for link in links))
            if not developer_ids:
                return ListResult(rows=[], total=0, page=page, limit=limit)
            filters.one_of["id"] = developer_ids

        total = self.store.count_rows(self.table, filters)
        rows = self.store.fetch_rows(
            self.table,
            filters,
            columns=self.columns,
            offset=offset,
            limit=limit,
        )
        return ListResult(
            rows=self._attach_cities(rows),
            total=total,
            page=page,
            limit=limit,
        )

    def get_by_id(self, entity_id: str) -> dict[str, Any] | None:
        """Fetch one developer with its cities, or None."""
        developer = super().get_by_id(entity_id)
        if developer is None:
            return None
        return self._attach_cities([developer])[0]

    def get_by_slug(self, slug: str, active_only: bool = False) -> dict[str, Any] | None:
        developer = super().get_by_slug(slug, active_only=active_only)
        if developer is None:
            return None
        return self._attach_cities([developer])[0]

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    def insert(self, payload: DeveloperCreate) -> MutationResult:
        """
        Create a developer, then link its cities.

        A failure to link cities does not undo the creation; it is reported
        in `warnings` and the returned record lists no cities.

        Raises:
            SlugConflictError: If the slug keeps colliding on write
            SupabaseClientError: If the developer row cannot be written
        """
        cities = normalize_labels(payload.cities)
        row = payload.model_dump(mode="json", exclude={"cities"})

        proposed_slug = payload.slug or payload.name
        row["slug"] = self.resolve_slug(proposed_slug)

        created = self._write_with_slug_retry(
            lambda r: self.store.insert_row(self.table, r),
            row,
            proposed_slug,
        )
        logger.info(f"Created developer {created.get('id')} with slug '{created.get('slug')}'")

        linked, warnings = self._link_cities(created["id"], cities)
        return MutationResult(record={**created, "cities": linked}, warnings=warnings)

    def update(self, developer_id: str, patch: DeveloperUpdate) -> MutationResult | None:
        """
        Apply a partial update.

        Unset and null fields are left alone, except `logo_url: null` which
        clears the logo (as does `remove_logo`). When `cities` is set the
        city links are replaced; that step can only produce warnings.

        Returns:
            MutationResult, or None if the developer doesn't exist
        """
        current = self.get_by_id(developer_id)
        if current is None:
            return None

        changes = {
            key: value
            for key, value in patch.model_dump(
                mode="json",
                exclude_unset=True,
                exclude={"remove_logo", "cities"},
            ).items()
            if value is not None
        }

        clear_logo = patch.remove_logo or (
            "logo_url" in patch.model_fields_set and patch.logo_url is None
        )
        logo = reconcile_single(
            current.get("logo_url"),
            changes.pop("logo_url", None),
            remove=clear_logo,
        )
        if logo.changed:
            changes["logo_url"] = logo.value

        proposed_slug = None
        if "slug" in changes:
            proposed_slug = changes["slug"] or changes.get("name") or current.get("name")
            changes["slug"] = self.resolve_slug(proposed_slug, exclude_id=developer_id)

        changes = self.drop_unchanged(changes, current)
        if changes:
            updated = self._write_with_slug_retry(
                lambda r: self.store.update_row(self.table, developer_id, r),
                changes,
                proposed_slug,
                exclude_id=developer_id,
            )
            if updated is None:
                return None
            logger.info(f"Updated developer {developer_id}: {sorted(changes)}")
        else:
            updated = {key: value for key, value in current.items() if key != "cities"}

        warnings: list[str] = []
        cities = current.get("cities", [])
        if patch.cities is not None:
            replaced, city_warnings = self._replace_cities(
                developer_id,
                normalize_labels(patch.cities),
            )
            warnings.extend(city_warnings)
            if replaced is not None:
                cities = replaced

        deleted_files, file_warnings = self._delete_files(self.config.bucket, logo.to_delete)
        warnings.extend(file_warnings)

        return MutationResult(
            record={**updated, "cities": cities},
            warnings=warnings,
            deleted_files=deleted_files,
        )

    def remove(self, developer_id: str) -> DeleteResult | None:
        """
        Delete a developer, its logo file and its city links.

        Logo and link cleanup are best-effort; the developer row is deleted
        regardless.

        Returns:
            DeleteResult, or None if the developer doesn't exist
        """
        current = self.store.fetch_row(self.table, developer_id, columns=self.columns)
        if current is None:
            return None

        deleted_files, warnings = self._delete_files(
            self.config.bucket,
            [current.get("logo_url")],
        )

        try:
            self.store.delete_rows(CITY_TABLE, TableFilter(equals={"developer_id": developer_id}))
        except SupabaseClientError as e:
            logger.warning(f"Failed to unlink cities of developer {developer_id}: {e}")
            warnings.append(f"Failed to unlink cities: {e.message}")

        deleted = self.store.delete_row(self.table, developer_id)
        logger.info(f"Deleted developer {developer_id} (row deleted: {deleted})")
        return DeleteResult(
            id=str(developer_id),
            deleted=deleted,
            deleted_files=len(deleted_files),
            warnings=warnings,
        )

    # -------------------------------------------------------------------------
    # City links
    # -------------------------------------------------------------------------

    def _attach_cities(self, developers: list[dict[str, Any]]) -> list[dict[str, Any]]:
        """Return copies of `developers` with a `cities` list each."""
        if not developers:
            return []

        links = self.store.fetch_rows(
            CITY_TABLE,
            TableFilter(one_of={"developer_id": [d["id"] for d in developers]}),
            columns="developer_id, city",
            order_by=None,
        )
        by_developer: dict[str, list[str]] = defaultdict(list)
        for link in links:
            by_developer[link["developer_id"]].append(link["city"])

        return [
            {**developer, "cities": normalize_labels(by_developer.get(developer["id"]))}
            for developer in developers
        ]

    def _link_cities(
        self,
        developer_id: str,
        cities: list[str],
    ) -> tuple[list[str], list[str]]:
        """
        Insert city links.

        Returns:
            (linked cities, warnings)
        """
        if not cities:
            return [], []

        try:
            self.store.insert_rows(
                CITY_TABLE,
                [{"developer_id": developer_id, "city": city} for city in cities],
            )
        except SupabaseClientError as e:
            logger.warning(f"Failed to link cities {cities} to developer {developer_id}: {e}")
            return [], [f"Failed to link cities {', '.join(cities)}: {e.message}"]

        return cities, []

    def _replace_cities(
        self,
        developer_id: str,
        cities: list[str],
    ) -> tuple[list[str] | None, list[str]]:
        """
        Replace all city links of a developer.

        Returns:
            (cities now linked, or None if the old links could not be
            removed and are unchanged; warnings)
        """
        try:
            self.store.delete_rows(CITY_TABLE, TableFilter(equals={"developer_id": developer_id}))
        except SupabaseClientError as e:
            logger.warning(f"Failed to unlink cities of developer {developer_id}: {e}")
            return None, [f"Failed to replace cities: {e.message}"]

        return self._link_cities(developer_id, cities)
