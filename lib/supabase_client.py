# =============================================================================
# lib/supabase_client.py - Supabase Client Wrapper
# =============================================================================
# This module owns the process-wide Supabase client and the error types
# raised by the adapters built on top of it:
# - SupabaseClient: lazily created singleton (service_role key)
# - SupabaseClientError: any database failure, with an actionable suggestion
# - UniqueViolationError: a write rejected by a unique index (e.g. slug)
#
# Usage:
#   from lib.supabase_client import SupabaseClient
#   client = SupabaseClient.get_client()
#   client.table("projects").select("id").limit(1).execute()
# =============================================================================

from __future__ import annotations

import logging
from typing import Any

from supabase import create_client, Client

from app.config import settings

# Set up logging for this module
logger = logging.getLogger(__name__)

# PostgREST / Postgres error codes we react to
NO_ROWS_CODE = "PGRST116"
INVALID_TEXT_CODE = "22P02"
UNIQUE_VIOLATION_CODE = "23505"


class SupabaseClientError(Exception):
    """
    Error during Supabase operations.

    Provides actionable error messages:
    errors should tell HOW to fix, not just WHAT failed.
    """

    def __init__(
        self,
        message: str,
        code: str = "SUPABASE_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.details = details or {}

    def __str__(self) -> str:
        result = f"[{self.code}] {self.message}"
        if self.suggestion:
            result += f" Suggestion: {self.suggestion}"
        return result


class UniqueViolationError(SupabaseClientError):
    """Raised when a write is rejected by a unique constraint."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(
            message=message,
            code="UNIQUE_VIOLATION",
            suggestion="Pick a different value for the unique column and retry",
            details=details,
        )


def error_code(exc: Exception) -> str | None:
    """
    Extract the PostgREST/Postgres error code from an exception.

    postgrest's APIError exposes `.code`; anything else is matched on its
    string form.
    """
    code = getattr(exc, "code", None)
    if isinstance(code, str) and code:
        return code
    text = str(exc)
    for known in (NO_ROWS_CODE, INVALID_TEXT_CODE, UNIQUE_VIOLATION_CODE):
        if known in text:
            return known
    return None


def is_no_rows(exc: Exception) -> bool:
    """True for "no rows" and malformed-id errors, both meaning "not found"."""
    return error_code(exc) in (NO_ROWS_CODE, INVALID_TEXT_CODE)


def is_unique_violation(exc: Exception) -> bool:
    return error_code(exc) == UNIQUE_VIOLATION_CODE


class SupabaseClient:
    """
    Holder for the singleton Supabase client.

    One client instance is shared across the application. All methods are
    class methods for easy access without instantiation.
    """

    _instance: Client | None = None

    @classmethod
    def get_client(cls) -> Client:
        """
        Get or create the singleton Supabase client.

        Uses service_role key which bypasses Row Level Security (RLS).
        This is appropriate for server-side admin operations.

        Raises:
            SupabaseClientError: If client creation fails
        """
        if cls._instance is None:
            try:
                cls._instance = create_client(
                    settings.SUPABASE_URL,
                    settings.SUPABASE_SERVICE_KEY
                )
                logger.info("Supabase client initialized successfully")
            except Exception as e:
                raise SupabaseClientError(
                    message=f"Failed to create Supabase client: {e}",
                    code="CLIENT_INIT_FAILED",
                    suggestion="Check SUPABASE_URL and SUPABASE_SERVICE_KEY in your .env file"
                )
        return cls._instance
