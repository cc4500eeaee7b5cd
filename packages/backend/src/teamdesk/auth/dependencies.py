"""FastAPI auth dependencies.

Learn: These are used as Depends() in route handlers to extract
and validate the current identity from the request.

Token verification is pure computation — no database round-trip.
The claims signed into the token at login ARE the identity for the
lifetime of the request.

Failure modes:
- No "Authorization: Bearer <token>" header → MissingToken (401)
- Bad signature, malformed, or expired token → InvalidToken (403)
"""

import uuid
from typing import Optional

import structlog
from fastapi import Header

from teamdesk.auth.jwt import TokenError, verify_token
from teamdesk.errors import InvalidToken, MissingToken

logger = structlog.get_logger()


class CurrentIdentity:
    """Represents the authenticated user making the request.

    Learn: This is the unified auth context. All downstream code uses
    team_id to scope queries — never a team value from the request body.
    """

    def __init__(
        self,
        user_id: str,
        email: str = "",
        name: str = "",
        role: str = "user",
        team_name: Optional[str] = None,
        team_id: Optional[uuid.UUID] = None,
    ):
        self.user_id = user_id
        self.email = email
        self.name = name
        self.role = role
        self.team_name = team_name
        self.team_id = team_id

    @property
    def has_team(self) -> bool:
        return self.team_id is not None

    @classmethod
    def from_claims(cls, claims: dict) -> "CurrentIdentity":
        team_id = claims.get("teamId")
        try:
            team_uuid = uuid.UUID(team_id) if team_id else None
        except (ValueError, TypeError):
            raise TokenError("Invalid token: malformed teamId claim")
        return cls(
            user_id=str(claims["id"]),
            email=claims.get("email", ""),
            name=claims.get("name", ""),
            role=claims.get("role", "user"),
            team_name=claims.get("teamName"),
            team_id=team_uuid,
        )

    def claims(self) -> dict:
        """The identity as the public claim set (what /auth/me returns)."""
        return {
            "id": self.user_id,
            "email": self.email,
            "name": self.name,
            "role": self.role,
            "teamName": self.team_name,
            "teamId": str(self.team_id) if self.team_id else None,
        }


def _bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


async def get_current_user(
    authorization: Optional[str] = Header(None),
) -> CurrentIdentity:
    """Extract current identity (required).

    Learn: This is the "hard" auth dependency. Every router except
    health and auth is mounted with it in api/__init__.py.
    """
    token = _bearer_token(authorization)
    if token is None:
        raise MissingToken()

    try:
        return CurrentIdentity.from_claims(verify_token(token))
    except TokenError as e:
        logger.info("auth.token_rejected", reason=str(e))
        raise InvalidToken()
