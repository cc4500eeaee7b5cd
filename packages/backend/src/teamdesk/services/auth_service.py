"""Auth service — registration and login.

Learn: Service layer separates business logic from HTTP routing.
Routes call services, services call the database.

Rules enforced here:
1. Emails are normalized (stripped + lowercased) before every lookup,
   so "A@x.com" and "a@x.com" are the same account.
2. Passwords are bcrypt-hashed off the event loop; the plaintext is
   never stored or logged.
3. Login failures are deliberately ambiguous — unknown email and wrong
   password raise the same InvalidCredentials, after the same amount
   of bcrypt work.
4. Teams are created implicitly by the first registration naming them.
"""

import asyncio
from typing import Optional

import structlog
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from teamdesk.auth.jwt import create_access_token
from teamdesk.auth.password import burn_verify, hash_password, verify_password
from teamdesk.config import settings
from teamdesk.db.models import Team, User
from teamdesk.errors import DuplicateEmail, InvalidCredentials, ValidationError

logger = structlog.get_logger()

# users.name and created_by columns are String(100).
MAX_NAME_LENGTH = 100


def normalize_email(email: str) -> str:
    return email.strip().lower()


def identity_claims(user: User) -> dict:
    """The claim set signed into every token for this user."""
    return {
        "id": str(user.id),
        "email": user.email,
        "name": user.name,
        "role": user.role,
        "teamName": user.team.name,
        "teamId": str(user.team.id),
    }


class AuthService:
    """Business logic for accounts and tokens."""

    def __init__(self, db: AsyncSession):
        self.db = db

    # ─── Register ────────────────────────────────────────

    async def register(
        self,
        email: Optional[str],
        password: Optional[str],
        name: Optional[str] = None,
        team_name: Optional[str] = None,
    ) -> tuple[User, str]:
        """Create an account (and its team, if new). Returns (user, token)."""
        if not email or not email.strip() or not password:
            raise ValidationError("Email and password are required.")

        email = normalize_email(email)
        if await self.find_user(email) is not None:
            raise DuplicateEmail()

        password_hash = await asyncio.to_thread(hash_password, password)
        display_name = ((name or "").strip() or email.split("@")[0])[:MAX_NAME_LENGTH]
        team_name = (team_name or "").strip() or settings.default_team_name

        # Two attempts: a concurrent registration may create the same team
        # (or claim the same email) between our lookup and our commit.
        for attempt in (1, 2):
            team = await self._get_or_create_team(team_name)
            user = User(
                email=email,
                name=display_name,
                password_hash=password_hash,
                role="user",
                team=team,
            )
            self.db.add(user)
            try:
                await self.db.commit()
                break
            except IntegrityError:
                await self.db.rollback()
                if await self.find_user(email) is not None:
                    raise DuplicateEmail()
                if attempt == 2:
                    raise

        logger.info("auth.registered", user_id=str(user.id), team=team.name)
        return user, create_access_token(identity_claims(user))

    # ─── Login ───────────────────────────────────────────

    async def login(
        self, email: Optional[str], password: Optional[str]
    ) -> tuple[User, str]:
        """Verify credentials and issue a fresh token. Returns (user, token)."""
        if not email or not email.strip() or not password:
            raise ValidationError("Email and password are required.")

        user = await self.find_user(normalize_email(email))
        if user is None:
            await asyncio.to_thread(burn_verify, password)
            logger.info("auth.login_failed")
            raise InvalidCredentials()

        if not await asyncio.to_thread(verify_password, password, user.password_hash):
            logger.info("auth.login_failed", user_id=str(user.id))
            raise InvalidCredentials()

        logger.info("auth.logged_in", user_id=str(user.id))
        return user, create_access_token(identity_claims(user))

    # ─── Helpers ─────────────────────────────────────────

    async def find_user(self, email: str) -> Optional[User]:
        result = await self.db.execute(select(User).where(User.email == email))
        return result.scalars().first()

    async def _get_or_create_team(self, name: str) -> Team:
        result = await self.db.execute(select(Team).where(Team.name == name))
        team = result.scalars().first()
        if team is None:
            team = Team(name=name)
            self.db.add(team)
            logger.info("team.created", team=name)
        return team
