# =============================================================================
# app/ - FastAPI Application Package
# =============================================================================
# This package contains the admin HTTP API:
# - main.py: App entry point, middleware setup, error handlers
# - config.py: Environment variable loading and settings
# - dependencies.py: Repository/storage providers for route handlers
# - uploads.py: Multipart file reading with size/count limits
# - routers/: API endpoint definitions organized by feature
#
# The app layer is thin - it handles HTTP concerns and delegates
# business logic to the core/ package.
# =============================================================================

__version__ = "1.0.0"
