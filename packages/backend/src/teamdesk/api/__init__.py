"""API route aggregation.

All routers registered here get mounted in main.py.

Learn: Auth is applied at the include_router level using FastAPI's
dependencies parameter. This protects all routes in each router
without relying on individual handlers. Health and auth routers are
open (no auth required); /auth/me declares its own dependency.
"""

from fastapi import APIRouter, Depends

from teamdesk.api.auth import router as auth_router
from teamdesk.api.health import router as health_router
from teamdesk.api.resources import leads_router, projects_router, tasks_router
from teamdesk.api.team import router as team_router
from teamdesk.auth.dependencies import get_current_user

# All protected routers require authentication
_auth = [Depends(get_current_user)]

api_router = APIRouter(prefix="/api")

# Open routes — no auth required
api_router.include_router(health_router, tags=["health"])
api_router.include_router(auth_router, tags=["auth"])

# Protected routes — require a valid bearer token
api_router.include_router(team_router, tags=["team"], dependencies=_auth)
api_router.include_router(tasks_router, tags=["tasks"], dependencies=_auth)
api_router.include_router(projects_router, tags=["projects"], dependencies=_auth)
api_router.include_router(leads_router, tags=["leads"], dependencies=_auth)
