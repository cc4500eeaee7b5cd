"""SQLAlchemy ORM models — single source of truth for the database schema.

Learn: Declarative ORM mapping with SQLAlchemy 2.0 style (Mapped[] + mapped_column).
Each class = one table. Alembic migrations mirror these models.

Key concepts:
- UUID primary keys (generic Uuid type: native on PostgreSQL, CHAR(32) on SQLite)
- Teams are rows with a stable id. Users and team data point at team_id,
  so authorization never depends on comparing display names.
- Tasks, projects, and leads share the TeamOwned mixin: owning team,
  creator name, and timestamps. All three are set by the server only.
"""

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import (
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    Uuid,
)
from sqlalchemy.orm import (
    DeclarativeBase,
    Mapped,
    declared_attr,
    mapped_column,
    relationship,
)


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_uuid() -> uuid.UUID:
    return uuid.uuid4()


# ══════════════════════════════════════════════════════════════
# Tenancy: Teams and Users
# ══════════════════════════════════════════════════════════════


class Team(Base):
    """Tenant boundary. Created implicitly by the first registration naming it.

    Learn: The name is unique and user-facing; the id is what tokens and
    team data reference. Renaming a team would only touch this row.
    """

    __tablename__ = "teams"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=new_uuid
    )
    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )


class User(Base):
    """A human user. Belongs to exactly one team, fixed at registration."""

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=new_uuid
    )
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(String(20), nullable=False, default="user")
    team_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("teams.id"), nullable=False, index=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )

    team: Mapped["Team"] = relationship(lazy="joined")

    @property
    def team_name(self) -> str:
        return self.team.name


# ══════════════════════════════════════════════════════════════
# Team data: Tasks, Projects, Leads
# ══════════════════════════════════════════════════════════════


class TeamOwned:
    """Columns shared by every team-scoped record.

    Learn: declared_attr makes each subclass get its own copy of the
    foreign key and relationship. team is eager-loaded (joined) so
    team_name is always available without a lazy load, which async
    sessions don't allow.
    """

    @declared_attr
    def team_id(cls) -> Mapped[uuid.UUID]:
        return mapped_column(
            Uuid, ForeignKey("teams.id"), nullable=False, index=True
        )

    @declared_attr
    def team(cls) -> Mapped["Team"]:
        return relationship(lazy="joined")

    created_by: Mapped[str] = mapped_column(String(100), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False, index=True
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )

    @property
    def team_name(self) -> str:
        return self.team.name


class Task(TeamOwned, Base):
    __tablename__ = "tasks"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=new_uuid
    )
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    status: Mapped[str] = mapped_column(
        String(30), nullable=False, default="pending"
    )  # pending, in_progress, completed
    priority: Mapped[str] = mapped_column(
        String(20), nullable=False, default="medium"
    )  # low, medium, high
    assignee: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    due_date: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )


class Project(TeamOwned, Base):
    __tablename__ = "projects"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=new_uuid
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    client: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    status: Mapped[str] = mapped_column(
        String(30), nullable=False, default="planning"
    )  # planning, active, on_hold, completed
    priority: Mapped[str] = mapped_column(
        String(20), nullable=False, default="medium"
    )
    progress: Mapped[int] = mapped_column(Integer, nullable=False, default=0)


class Lead(TeamOwned, Base):
    __tablename__ = "leads"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=new_uuid
    )
    company: Mapped[str] = mapped_column(String(200), nullable=False)
    contact: Mapped[str] = mapped_column(String(200), nullable=False)
    contact_email: Mapped[str] = mapped_column(
        String(255), nullable=False, default=""
    )
    status: Mapped[str] = mapped_column(
        String(30), nullable=False, default="lead"
    )  # lead, contacted, proposal, negotiation, won, lost
    value: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    probability: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
