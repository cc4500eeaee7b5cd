"""Team-scoped resource store — CRUD for tasks, projects, and leads.

Learn: This is the CORE of the platform. One generic store, three
instantiations. Every method takes the caller's CurrentIdentity and
every query carries a `team_id == identity.team_id` filter:

- list:   only the caller's team, newest first; [] when no team
- create: team_id and created_by come from the identity, never the body
- update: ONE conditional UPDATE ... WHERE id = :id AND team_id = :team
- delete: ONE conditional DELETE ... WHERE id = :id AND team_id = :team

Because the team check lives inside the write statement, there is no
read-then-write window: a concurrent delete and update on the same id
can't resurrect a row or clobber each other. Zero affected rows means
NotFound, whether the id doesn't exist or belongs to another team.
The caller can't tell the difference, and that's the point.
"""

import uuid
from typing import Any, Generic, Optional, TypeVar

import structlog
from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from teamdesk.auth.dependencies import CurrentIdentity
from teamdesk.db.models import Lead, Project, Task, Team, utcnow
from teamdesk.errors import NoTeam, NotFound

logger = structlog.get_logger()

ModelT = TypeVar("ModelT", Task, Project, Lead)

# Never writable through create/update payloads.
SERVER_OWNED = frozenset(
    {"id", "team_id", "team", "created_by", "created_at", "updated_at"}
)


class TeamScopedStore(Generic[ModelT]):
    """Generic CRUD over one TeamOwned model."""

    model: type[ModelT]
    label: str = "Record"

    def __init__(self, db: AsyncSession):
        self.db = db

    # ─── Read ────────────────────────────────────────────

    async def list(self, identity: CurrentIdentity) -> list[ModelT]:
        if not identity.has_team:
            return []
        result = await self.db.execute(
            select(self.model)
            .where(self.model.team_id == identity.team_id)
            .order_by(self.model.created_at.desc())
        )
        return list(result.scalars().all())

    async def get(self, identity: CurrentIdentity, record_id: Any) -> ModelT:
        rid = self._parse_id(record_id)
        if not identity.has_team or rid is None:
            raise self._not_found()
        record = await self._fetch(identity, rid)
        if record is None:
            raise self._not_found()
        return record

    # ─── Create ──────────────────────────────────────────

    async def create(self, identity: CurrentIdentity, fields: dict) -> ModelT:
        """Insert a record owned by the caller's team.

        Learn: Fields left out (or sent as null) fall back to the model
        defaults: status pending/planning/lead, priority medium, numbers 0.
        """
        self._require_team(identity)
        team = await self.db.get(Team, identity.team_id)
        if team is None:
            raise NoTeam()

        values = {k: v for k, v in self._writable(fields).items() if v is not None}
        values = {**self.defaults(identity), **values}

        record = self.model(**values)
        record.team = team
        record.created_by = identity.name
        self.db.add(record)
        await self.db.commit()

        logger.info(
            "resource.created",
            kind=self.label.lower(),
            id=str(record.id),
            team_id=str(identity.team_id),
        )
        return record

    def defaults(self, identity: CurrentIdentity) -> dict:
        """Identity-dependent defaults. Overridden per entity."""
        return {}

    # ─── Update ──────────────────────────────────────────

    async def update(
        self, identity: CurrentIdentity, record_id: Any, changes: dict
    ) -> ModelT:
        """Merge partial fields over a record in the caller's team."""
        self._require_team(identity)
        rid = self._parse_id(record_id)
        if rid is None:
            raise self._not_found()

        values = self._writable(changes)
        values["updated_at"] = utcnow()

        result = await self.db.execute(
            update(self.model)
            .where(self.model.id == rid, self.model.team_id == identity.team_id)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            await self.db.rollback()
            raise self._not_found()
        await self.db.commit()

        logger.info(
            "resource.updated",
            kind=self.label.lower(),
            id=str(rid),
            fields=sorted(k for k in values if k != "updated_at"),
        )
        record = await self._fetch(identity, rid)
        if record is None:  # deleted right after our update
            raise self._not_found()
        return record

    # ─── Delete ──────────────────────────────────────────

    async def delete(self, identity: CurrentIdentity, record_id: Any) -> None:
        self._require_team(identity)
        rid = self._parse_id(record_id)
        if rid is None:
            raise self._not_found()

        result = await self.db.execute(
            delete(self.model)
            .where(self.model.id == rid, self.model.team_id == identity.team_id)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            await self.db.rollback()
            raise self._not_found()
        await self.db.commit()

        logger.info("resource.deleted", kind=self.label.lower(), id=str(rid))

    # ─── Helpers ─────────────────────────────────────────

    async def _fetch(
        self, identity: CurrentIdentity, rid: uuid.UUID
    ) -> Optional[ModelT]:
        result = await self.db.execute(
            select(self.model)
            .where(self.model.id == rid, self.model.team_id == identity.team_id)
            .execution_options(populate_existing=True)
        )
        return result.scalars().first()

    def _writable(self, fields: dict) -> dict:
        """Keep entity columns only; drop server-owned keys and nulls
        for columns that can't be null."""
        columns = self.model.__table__.columns
        out = {}
        for key, value in fields.items():
            if key in SERVER_OWNED or key not in columns:
                continue
            if value is None and not columns[key].nullable:
                continue
            out[key] = value
        return out

    @staticmethod
    def _parse_id(record_id: Any) -> Optional[uuid.UUID]:
        if isinstance(record_id, uuid.UUID):
            return record_id
        try:
            return uuid.UUID(str(record_id))
        except ValueError:
            return None

    @staticmethod
    def _require_team(identity: CurrentIdentity) -> None:
        if not identity.has_team:
            raise NoTeam()

    def _not_found(self) -> NotFound:
        return NotFound(f"{self.label} not found")


class TaskStore(TeamScopedStore[Task]):
    model = Task
    label = "Task"

    def defaults(self, identity: CurrentIdentity) -> dict:
        return {"assignee": identity.name}


class ProjectStore(TeamScopedStore[Project]):
    model = Project
    label = "Project"


class LeadStore(TeamScopedStore[Lead]):
    model = Lead
    label = "Lead"
