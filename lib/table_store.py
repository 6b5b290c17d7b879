# =============================================================================
# lib/table_store.py - Relational Store Adapter
# =============================================================================
# A thin, typed layer over the Supabase (PostgREST) query builder.
# Repositories depend on this interface only, so tests can swap in an
# in-memory implementation.
#
# Filters are expressed with TableFilter:
#   TableFilter(equals={"slug": "lake-view"}, not_equals={"id": project_id})
#   TableFilter(contains={"title": "lake"})        # case-insensitive substring
#   TableFilter(one_of={"id": ["a", "b"]})
#
# Every database failure is re-raised as SupabaseClientError (or
# UniqueViolationError for unique-index rejections).
# =============================================================================

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from supabase import Client

from lib.supabase_client import (
    SupabaseClient,
    SupabaseClientError,
    UniqueViolationError,
    is_no_rows,
    is_unique_violation,
)

logger = logging.getLogger(__name__)


@dataclass
class TableFilter:
    """Conjunction of simple column predicates."""

    equals: dict[str, Any] = field(default_factory=dict)
    not_equals: dict[str, Any] = field(default_factory=dict)
    contains: dict[str, str] = field(default_factory=dict)
    one_of: dict[str, list[Any]] = field(default_factory=dict)

    def apply(self, query: Any) -> Any:
        """Add the predicates to a PostgREST query builder."""
        for column, value in self.equals.items():
            query = query.eq(column, value)
        for column, value in self.not_equals.items():
            query = query.neq(column, value)
        for column, value in self.contains.items():
            query = query.ilike(column, f"%{value}%")
        for column, values in self.one_of.items():
            query = query.in_(column, list(values))
        return query

    def matches_nothing(self) -> bool:
        """An empty one_of list can never match; callers may skip the query."""
        return any(len(values) == 0 for values in self.one_of.values())


class TableStore:
    """
    Relational store adapter backed by Supabase.

    Example:
        store = TableStore()
        rows = store.fetch_rows(
            "projects",
            TableFilter(contains={"title": "lake"}),
            offset=0,
            limit=20,
        )
    """

    def __init__(self, client: Client | None = None):
        self._client = client

    @property
    def client(self) -> Client:
        return self._client or SupabaseClient.get_client()

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

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
        """
        Fetch rows matching `filters`.

        Args:
            table: Table name
            filters: Optional predicates
            columns: PostgREST column list
            order_by: Column to sort on (None for store order)
            descending: Sort direction
            offset: Zero-based index of the first row
            limit: Maximum number of rows

        Raises:
            SupabaseClientError: If the query fails
        """
        if filters and filters.matches_nothing():
            return []

        try:
            query = self.client.table(table).select(columns)
            if filters:
                query = filters.apply(query)
            if order_by:
                query = query.order(order_by, desc=descending)
            if limit is not None:
                start = offset or 0
                query = query.range(start, start + limit - 1)

            response = query.execute()
            return response.data or []

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to fetch rows from {table}: {e}",
                code="FETCH_ROWS_FAILED",
                details={"table": table},
            )

    def fetch_row(
        self,
        table: str,
        row_id: str,
        columns: str = "*",
    ) -> dict[str, Any] | None:
        """
        Fetch one row by primary key.

        Returns:
            Row dict, or None if no row has this id (including ids that are
            not valid UUIDs)

        Raises:
            SupabaseClientError: If the query fails
        """
        try:
            response = (
                self.client.table(table)
                .select(columns)
                .eq("id", row_id)
                .single()
                .execute()
            )
            return response.data

        except Exception as e:
            if is_no_rows(e):
                return None
            raise SupabaseClientError(
                message=f"Failed to fetch row from {table}: {e}",
                code="FETCH_ROW_FAILED",
                suggestion="Check that the id exists",
                details={"table": table, "id": row_id},
            )

    def exists(self, table: str, filters: TableFilter) -> bool:
        """True if at least one row matches `filters`."""
        rows = self.fetch_rows(table, filters, columns="id", order_by=None, limit=1)
        return len(rows) > 0

    def count_rows(self, table: str, filters: TableFilter | None = None) -> int:
        """
        Count rows matching `filters` (all rows when no filters).

        Raises:
            SupabaseClientError: If the query fails
        """
        if filters and filters.matches_nothing():
            return 0

        try:
            query = self.client.table(table).select("id", count="exact", head=True)
            if filters:
                query = filters.apply(query)
            response = query.execute()
            return response.count or 0

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to count rows in {table}: {e}",
                code="COUNT_ROWS_FAILED",
                details={"table": table},
            )

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    def insert_row(self, table: str, row: dict[str, Any]) -> dict[str, Any]:
        """
        Insert one row and return it as stored.

        Raises:
            UniqueViolationError: If a unique index rejects the row
            SupabaseClientError: If the insert fails otherwise
        """
        rows = self.insert_rows(table, [row])
        if not rows:
            raise SupabaseClientError(
                message=f"Insert into {table} returned no data",
                code="INSERT_NO_DATA",
            )
        return rows[0]

    def insert_rows(self, table: str, rows: list[dict[str, Any]]) -> list[dict[str, Any]]:
        """Insert several rows in one request."""
        if not rows:
            return []

        try:
            response = self.client.table(table).insert(rows).execute()
            return response.data or []

        except Exception as e:
            self._raise_write_error("insert into", table, e)

    def update_row(
        self,
        table: str,
        row_id: str,
        patch: dict[str, Any],
    ) -> dict[str, Any] | None:
        """
        Update one row by primary key.

        Returns:
            Updated row, or None if no row has this id

        Raises:
            UniqueViolationError: If a unique index rejects the new values
            SupabaseClientError: If the update fails otherwise
        """
        try:
            response = (
                self.client.table(table)
                .update(patch)
                .eq("id", row_id)
                .execute()
            )
            if response.data:
                return response.data[0]
            return None

        except Exception as e:
            if is_no_rows(e):
                return None
            self._raise_write_error("update", table, e, row_id)

    def delete_row(self, table: str, row_id: str) -> bool:
        """
        Delete one row by primary key.

        Returns:
            True if a row was deleted

        Raises:
            SupabaseClientError: If the delete fails
        """
        try:
            response = self.client.table(table).delete().eq("id", row_id).execute()
            return bool(response.data)

        except Exception as e:
            if is_no_rows(e):
                return False
            self._raise_write_error("delete from", table, e, row_id)

    def delete_rows(self, table: str, filters: TableFilter) -> int:
        """
        Delete every row matching `filters`.

        Returns:
            Number of deleted rows
        """
        if filters.matches_nothing():
            return 0

        try:
            query = filters.apply(self.client.table(table).delete())
            response = query.execute()
            return len(response.data or [])

        except Exception as e:
            self._raise_write_error("delete from", table, e)

    @staticmethod
    def _raise_write_error(
        action: str,
        table: str,
        exc: Exception,
        row_id: str | None = None,
    ) -> None:
        details = {"table": table}
        if row_id:
            details["id"] = row_id

        if is_unique_violation(exc):
            raise UniqueViolationError(
                message=f"Failed to {action} {table}: {exc}",
                details=details,
            )

        logger.error(f"Failed to {action} {table}: {exc}")
        raise SupabaseClientError(
            message=f"Failed to {action} {table}: {exc}",
            code="WRITE_FAILED",
            details=details,
        )
