# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up mock environment variables before any imports
# - In-memory stand-ins for the relational store and blob store, so the
#   repositories run end to end without Supabase
# - An API client wired to those stand-ins through dependency_overrides
# =============================================================================

import copy
import os
from datetime import datetime, timedelta, timezone
from typing import Any, Iterable
from uuid import uuid4

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_SERVICE_KEY", "test-service-key")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")

import pytest

from core.models.common import DeveloperStorageConfig, ProjectStorageConfig
from core.services.developer_service import DeveloperService
from core.services.project_service import ProjectService
from core.services.storage_service import BlobDeleteOutcome, UploadedFile
from lib.supabase_client import SupabaseClientError, UniqueViolationError
from lib.table_store import TableFilter

STORAGE_BASE_URL = "https://test-project.supabase.co/storage/v1/object/public"


# =============================================================================
# In-memory Relational Store
# =============================================================================

class InMemoryTableStore:
    """
    Dict-backed implementation of the TableStore interface.

    - `slug` is unique per table, like the real unique index
    - rows get a uuid `id` and increasing `created_at`
    - every write is recorded in `writes` as (operation, table)
    - tables listed in `failing_tables` reject writes with SupabaseClientError
    """

    UNIQUE_COLUMNS = {
        "projects": ("slug",),
        "developers": ("slug",),
    }

    def __init__(self):
        self.tables: dict[str, list[dict[str, Any]]] = {}
        self.writes: list[tuple[str, str]] = []
        self.failing_tables: set[str] = set()
        self._clock = datetime(2024, 1, 1, tzinfo=timezone.utc)

    # -- helpers --------------------------------------------------------------

    def _rows(self, table: str) -> list[dict[str, Any]]:
        return self.tables.setdefault(table, [])

    def _tick(self) -> str:
        self._clock += timedelta(seconds=1)
        return self._clock.isoformat()

    @staticmethod
    def _project(row: dict[str, Any], columns: str) -> dict[str, Any]:
        if columns.strip() == "*":
            return copy.deepcopy(row)
        names = [name.strip() for name in columns.split(",") if name.strip()]
        return {name: copy.deepcopy(row.get(name)) for name in names}

    @staticmethod
    def _matches(row: dict[str, Any], filters: TableFilter | None) -> bool:
        if filters is None:
            return True
        for column, value in filters.equals.items():
            if row.get(column) != value:
                return False
        for column, value in filters.not_equals.items():
            if row.get(column) == value:
                return False
        for column, value in filters.contains.items():
            if str(value).lower() not in str(row.get(column) or "").lower():
                return False
        for column, values in filters.one_of.items():
            if row.get(column) not in values:
                return False
        return True

    def _check_write(self, table: str, operation: str) -> None:
        if table in self.failing_tables:
            raise SupabaseClientError(
                message=f"Failed to {operation} {table}: connection refused",
                code="WRITE_FAILED",
            )
        self.writes.append((operation, table))

    def _check_unique(self, table: str, row: dict[str, Any], row_id: str | None = None) -> None:
        for column in self.UNIQUE_COLUMNS.get(table, ()):
            value = row.get(column)
            if value is None:
                continue
            for other in self._rows(table):
                if other["id"] != row_id and other.get(column) == value:
                    raise UniqueViolationError(
                        message=f"duplicate key value violates unique constraint on {table}.{column}",
                        details={"table": table},
                    )

    def add(self, table: str, **values) -> dict[str, Any]:
        """Seed a row directly, bypassing write recording."""
        row = {"id": str(uuid4()), "created_at": self._tick(), **values}
        self._rows(table).append(row)
        return copy.deepcopy(row)

    def get(self, table: str, row_id: str) -> dict[str, Any] | None:
        for row in self._rows(table):
            if row["id"] == row_id:
                return row
        return None

    # -- TableStore interface -------------------------------------------------

    def fetch_rows(
        self,
        table: str,
        filters: TableFilter | None = None,
        columns: str = "*",
        order_by: str | None = "created_at",
        descending: bool = True,
        offset: int | None = None,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        rows = [row for row in self._rows(table) if self._matches(row, filters)]
        if order_by:
            rows.sort(key=lambda row: str(row.get(order_by) or ""), reverse=descending)
        start = offset or 0
        if limit is not None:
            rows = rows[start:start + limit]
        return [self._project(row, columns) for row in rows]

    def fetch_row(self, table: str, row_id: str, columns: str = "*") -> dict[str, Any] | None:
        row = self.get(table, row_id)
        return self._project(row, columns) if row is not None else None

    def exists(self, table: str, filters: TableFilter) -> bool:
        return any(self._matches(row, filters) for row in self._rows(table))

    def count_rows(self, table: str, filters: TableFilter | None = None) -> int:
        return sum(1 for row in self._rows(table) if self._matches(row, filters))

    def insert_row(self, table: str, row: dict[str, Any]) -> dict[str, Any]:
        return self.insert_rows(table, [row])[0]

    def insert_rows(self, table: str, rows: list[dict[str, Any]]) -> list[dict[str, Any]]:
        if not rows:
            return []
        self._check_write(table, "insert into")
        created = []
        for row in rows:
            self._check_unique(table, row)
            now = self._tick()
            stored = {
                "id": str(uuid4()),
                "created_at": now,
                "updated_at": now,
                **copy.deepcopy(row),
            }
            self._rows(table).append(stored)
            created.append(copy.deepcopy(stored))
        return created

    def update_row(self, table: str, row_id: str, patch: dict[str, Any]) -> dict[str, Any] | None:
        self._check_write(table, "update")
        row = self.get(table, row_id)
        if row is None:
            return None
        self._check_unique(table, {**row, **patch}, row_id)
        row.update(copy.deepcopy(patch))
        row["updated_at"] = self._tick()
        return copy.deepcopy(row)

    def delete_row(self, table: str, row_id: str) -> bool:
        self._check_write(table, "delete from")
        row = self.get(table, row_id)
        if row is None:
            return False
        self._rows(table).remove(row)
        return True

    def delete_rows(self, table: str, filters: TableFilter) -> int:
        self._check_write(table, "delete from")
        doomed = [row for row in self._rows(table) if self._matches(row, filters)]
        for row in doomed:
            self._rows(table).remove(row)
        return len(doomed)


# =============================================================================
# Recording Blob Store
# =============================================================================

class RecordingStorage:
    """
    Stand-in for StorageService that records uploads and deletions.

    - `failing_urls`: URLs reported as not deleted
    - `raise_on_delete`: make delete_by_urls raise (adapter misbehaving)
    """

    def __init__(self):
        self.uploads: list[tuple[str, str, str]] = []
        self.delete_calls: list[tuple[str, list[str]]] = []
        self.failing_urls: set[str] = set()
        self.raise_on_delete = False

    @property
    def deleted(self) -> list[str]:
        """Every URL submitted for deletion, across calls."""
        return [url for _, urls in self.delete_calls for url in urls]

    def upload(
        self,
        bucket: str,
        folder: str,
        content: bytes,
        filename: str,
        content_type: str | None = None,
    ) -> str:
        self.uploads.append((bucket, folder, filename))
        return f"{STORAGE_BASE_URL}/{bucket}/{folder}/{len(self.uploads)}-{filename}"

    def upload_many(self, bucket: str, folder: str, files: Iterable[UploadedFile]) -> list[str]:
        return [
            self.upload(bucket, folder, f.content, f.filename, f.content_type)
            for f in files
        ]

    def delete_by_urls(self, bucket: str, urls: Iterable[str]) -> list[BlobDeleteOutcome]:
        urls = list(urls)
        self.delete_calls.append((bucket, urls))
        if self.raise_on_delete:
            raise RuntimeError("storage unavailable")
        return [
            BlobDeleteOutcome(url=url, deleted=False, error="Object not found in storage")
            if url in self.failing_urls
            else BlobDeleteOutcome(url=url, deleted=True)
            for url in urls
        ]


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def store():
    """Empty in-memory relational store."""
    return InMemoryTableStore()


@pytest.fixture
def storage():
    """Recording blob store."""
    return RecordingStorage()


@pytest.fixture
def project_service(store, storage):
    """Project repository over the in-memory stores."""
    return ProjectService(
        store=store,
        storage=storage,
        config=ProjectStorageConfig(),
        max_limit=150,
    )


@pytest.fixture
def developer_service(store, storage):
    """Developer repository over the in-memory stores."""
    return DeveloperService(
        store=store,
        storage=storage,
        config=DeveloperStorageConfig(),
        max_limit=150,
    )


@pytest.fixture
def api_client(store, storage):
    """TestClient whose repositories use the in-memory stores."""
    from fastapi.testclient import TestClient

    from app.dependencies import get_storage_service, get_table_store
    from app.main import app

    app.dependency_overrides[get_table_store] = lambda: store
    app.dependency_overrides[get_storage_service] = lambda: storage
    with TestClient(app, raise_server_exceptions=False) as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def sample_project_payload():
    """Sample project data for testing."""
    return {
        "title": "Lake View",
        "description": "Waterfront apartments",
        "location": "Dubai Marina",
        "status": True,
        "amenities": [{"title": "Pool"}, {"title": "Gym", "description": "24/7"}],
        "meta": {"price_from": 1200000},
    }
