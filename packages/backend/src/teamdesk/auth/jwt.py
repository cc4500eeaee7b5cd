"""JWT token creation and verification.

Learn: JWT (JSON Web Token) provides stateless authentication.
One token per login, valid for 30 days. There is no refresh flow and
no revocation list — expiry is the only lifetime bound.

The token carries the identity claims every request needs:
id, email, name, role, teamName, and teamId. Authorization compares
teamId (a stable UUID); teamName is display data.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Optional

import jwt

from teamdesk.config import settings

IDENTITY_CLAIMS = ("id", "email", "name", "role", "teamName", "teamId")


class TokenError(Exception):
    """Raised when token verification fails."""


def create_access_token(
    claims: dict[str, Any],
    expires_days: Optional[int] = None,
) -> str:
    """Create a signed JWT carrying the identity claims."""
    now = datetime.now(timezone.utc)
    payload = {k: claims[k] for k in IDENTITY_CLAIMS if claims.get(k) is not None}
    payload["iat"] = now
    payload["exp"] = now + timedelta(
        days=expires_days if expires_days is not None else settings.token_expire_days
    )
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def verify_token(token: str) -> dict:
    """Verify and decode a JWT token.

    Returns the payload dict on success.
    Raises TokenError on failure.
    """
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            options={"require": ["exp", "id"]},
        )
        return payload
    except jwt.ExpiredSignatureError:
        raise TokenError("Token has expired")
    except jwt.InvalidTokenError as e:
        raise TokenError(f"Invalid token: {e}")
