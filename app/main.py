# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the Estate Admin API.
# It configures the FastAPI application with middleware, routers, and handlers.
#
# Usage:
#   uvicorn app.main:app --reload
# =============================================================================

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app import __version__
from app.config import settings
from app.exceptions import (
    EstateAdminException,
    estate_admin_exception_handler,
    store_exception_handler,
    validation_exception_handler,
)
from app.routers import dashboard, developers, health, projects, public
from lib.supabase_client import SupabaseClientError

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Runs on startup and shutdown. The Supabase client is created lazily on
    first use, so startup only reports configuration.
    """
    # Startup
    logger.info(f"Starting Estate Admin API in {settings.ENVIRONMENT} mode")
    logger.info(f"CORS origins: {settings.cors_origins_list}")
    logger.info(
        f"Storage buckets: projects={settings.PROJECT_BUCKET}, "
        f"developers={settings.DEVELOPER_BUCKET}"
    )

    yield

    # Shutdown
    logger.info("Shutting down Estate Admin API")


# Create FastAPI application
app = FastAPI(
    title="Estate Admin API",
    description="""
## Real-Estate Admin API

Back office for a real-estate listing site: projects, developers and the
files attached to them.

### Key Features

- **Unique Slugs**: URL slugs are derived from titles/names and de-duplicated
  (`lake-view`, `lake-view-1`, ...)
- **File Sync**: Replacing or removing hero images, gallery images, documents
  and logos deletes the files that are no longer referenced
- **Partial Updates**: Omitted fields are left unchanged
- **Non-fatal Warnings**: Secondary failures (city links, file cleanup) are
  reported in `warnings` without failing the request

### Quick Start

```bash
# Create a project with a hero image
curl -X POST http://localhost:8000/api/v1/projects \\
  -F "title=Lake View" -F "hero_image=@hero.jpg"

# Replace the gallery, keeping one existing image
curl -X PUT http://localhost:8000/api/v1/projects/{id} \\
  -F 'existing_images=["https://.../a.jpg"]' -F "images=@b.jpg"
```
""",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    openapi_tags=[
        {
            "name": "Projects",
            "description": "Create, update and delete projects and their files",
        },
        {
            "name": "Developers",
            "description": "Create, update and delete developers, their cities and logos",
        },
        {
            "name": "Public",
            "description": "Active projects and developers by slug",
        },
        {
            "name": "Dashboard",
            "description": "Aggregate counts for the admin dashboard",
        },
        {
            "name": "Health",
            "description": "API health and readiness checks",
        },
    ],
)


# =============================================================================
# Middleware
# =============================================================================

# CORS middleware - allows cross-origin requests
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list if settings.is_production else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Exception Handlers
# =============================================================================

@app.exception_handler(EstateAdminException)
async def handle_estate_admin_exception(request: Request, exc: EstateAdminException):
    """Handle custom API exceptions."""
    return await estate_admin_exception_handler(request, exc)


@app.exception_handler(SupabaseClientError)
async def handle_store_exception(request: Request, exc: SupabaseClientError):
    """Handle database failures."""
    return await store_exception_handler(request, exc)


@app.exception_handler(RequestValidationError)
async def handle_validation_exception(request: Request, exc: RequestValidationError):
    """Handle request validation failures."""
    return await validation_exception_handler(request, exc)


@app.exception_handler(Exception)
async def handle_general_exception(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.exception(f"Unexpected error: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "detail": "An unexpected error occurred",
            "code": "INTERNAL_ERROR",
        }
    )


# =============================================================================
# Routers
# =============================================================================

# Health check endpoints
app.include_router(
    health.router,
    prefix="/api/v1",
    tags=["Health"]
)

# Project admin endpoints
app.include_router(
    projects.router,
    prefix="/api/v1/projects",
    tags=["Projects"]
)

# Developer admin endpoints
app.include_router(
    developers.router,
    prefix="/api/v1/developers",
    tags=["Developers"]
)

# Public read endpoints
app.include_router(
    public.router,
    prefix="/api/v1/public",
    tags=["Public"]
)

# Dashboard endpoints
app.include_router(
    dashboard.router,
    prefix="/api/v1/dashboard",
    tags=["Dashboard"]
)


# =============================================================================
# Root Endpoint
# =============================================================================

@app.get("/", tags=["Root"])
async def root():
    """
    Root endpoint - returns API info.
    """
    return {
        "name": "Estate Admin API",
        "version": __version__,
        "docs": "/docs",
        "health": "/api/v1/health",
    }
