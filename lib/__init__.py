# =============================================================================
# lib/ - Standalone Utility Modules
# =============================================================================
# This package contains reusable building blocks:
# - slugs.py: URL slug normalization and collision-free slug resolution
# - file_sync.py: Reconciliation of stored file references (orphan cleanup)
# - normalize.py: Shaping of array-valued columns (amenities, cities)
# - supabase_client.py: Supabase client singleton and error types
# - table_store.py: Typed relational store adapter over Supabase
# - utils.py: Form value coercion (JSON, booleans, integers)
#
# Apart from the Supabase adapters, these modules are pure and can be
# tested in isolation.
# =============================================================================

from lib.file_sync import (
    FileReconciliation,
    SingleFileReconciliation,
    reconcile,
    reconcile_single,
    unique_refs,
)
from lib.normalize import normalize_amenities, normalize_labels
from lib.slugs import MAX_SLUG_ATTEMPTS, generate_unique_slug, slugify
from lib.utils import decode_json, to_bool

__all__ = [
    # Slugs
    "MAX_SLUG_ATTEMPTS",
    "generate_unique_slug",
    "slugify",
    # File reconciliation
    "FileReconciliation",
    "SingleFileReconciliation",
    "reconcile",
    "reconcile_single",
    "unique_refs",
    # Normalization
    "normalize_amenities",
    "normalize_labels",
    # Utils
    "decode_json",
    "to_bool",
]
