"""Team service — membership queries.

Learn: A team has no membership table. Membership is simply
"users whose team_id matches", fixed at registration.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from teamdesk.auth.dependencies import CurrentIdentity
from teamdesk.db.models import User


class TeamService:
    """Business logic for team membership."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_members(self, identity: CurrentIdentity) -> list[User]:
        if not identity.has_team:
            return []
        result = await self.db.execute(
            select(User)
            .where(User.team_id == identity.team_id)
            .order_by(User.created_at)
        )
        return list(result.scalars().all())
