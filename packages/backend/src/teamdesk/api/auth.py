"""Auth API — registration, login, current identity.

Learn: Routes for user authentication:
- POST /auth/register → create account (+ team if new) → user + token
- POST /auth/login → email/password → user + token
- GET /auth/me → the verified claims of the presented token

Register and login are open. /me is the simplest protected route:
it returns exactly what the token says, with no database lookup.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from teamdesk.auth.dependencies import CurrentIdentity, get_current_user
from teamdesk.db.engine import get_db
from teamdesk.schemas.auth import (
    AuthResponse,
    LoginRequest,
    MeResponse,
    RegisterRequest,
)
from teamdesk.services.auth_service import AuthService

router = APIRouter(prefix="/auth")


def _svc(db: AsyncSession = Depends(get_db)) -> AuthService:
    return AuthService(db)


@router.post("/register", response_model=AuthResponse, status_code=201)
async def register(body: RegisterRequest, svc: AuthService = Depends(_svc)):
    """Create a new user account. Joins (or founds) the named team."""
    user, token = await svc.register(
        email=body.email,
        password=body.password,
        name=body.name,
        team_name=body.team_name,
    )
    return {"message": "Registration complete", "user": user, "token": token}


@router.post("/login", response_model=AuthResponse)
async def login(body: LoginRequest, svc: AuthService = Depends(_svc)):
    """Login with email and password → JWT token."""
    user, token = await svc.login(email=body.email, password=body.password)
    return {"message": "Login successful", "user": user, "token": token}


@router.get("/me", response_model=MeResponse)
async def get_me(identity: CurrentIdentity = Depends(get_current_user)):
    """Get the current authenticated user's claims."""
    return {"user": identity.claims()}
