# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# This package contains FastAPI routers organized by feature:
# - health.py: Health check endpoints
# - projects.py: Project CRUD, status and file uploads (admin)
# - developers.py: Developer CRUD and status (admin)
# - public.py: Active-only reads by slug for the public site
# - dashboard.py: Aggregate counts for the admin dashboard
#
# Each router is mounted in main.py with a URL prefix.
# =============================================================================

from . import health
from . import projects
from . import developers
from . import public
from . import dashboard

__all__ = [
    "health",
    "projects",
    "developers",
    "public",
    "dashboard",
]
