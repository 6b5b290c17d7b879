# =============================================================================
# core/ - Business Logic Package
# =============================================================================
# This package contains the repositories behind the admin API:
# - models/: Pydantic schemas for payloads, results and storage config
# - services/: Project/developer repositories, storage adapter, dashboard
#
# Code in this package should NOT import from FastAPI.
# This keeps the logic testable and reusable.
# =============================================================================
