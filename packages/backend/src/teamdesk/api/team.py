"""Team API — who else is on my team."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from teamdesk.auth.dependencies import CurrentIdentity, get_current_user
from teamdesk.db.engine import get_db
from teamdesk.schemas.auth import UserRead
from teamdesk.services.team_service import TeamService

router = APIRouter(prefix="/team")


def _svc(db: AsyncSession = Depends(get_db)) -> TeamService:
    return TeamService(db)


@router.get("/members", response_model=list[UserRead])
async def list_members(
    identity: CurrentIdentity = Depends(get_current_user),
    svc: TeamService = Depends(_svc),
):
    return await svc.list_members(identity)
