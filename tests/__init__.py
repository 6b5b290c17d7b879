# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the Estate Admin API:
# - test_slugs.py / test_file_sync.py / test_utils.py: pure helpers in lib/
# - test_models.py: Pydantic model validation
# - test_table_store.py / test_storage_service.py: Supabase adapters (mocked)
# - test_project_service.py / test_developer_service.py: repositories end
#   to end over in-memory stores
# - test_api.py: HTTP routes through FastAPI's TestClient
#
# Run tests with: pytest
# =============================================================================
