"""Pydantic schemas for tasks, projects, and leads.

Learn: Separate schemas for create/update/read keeps the API clean.
- *Create: what you POST (entity fields only, with defaults)
- *Update: what you PUT (all optional — only sent fields are applied)
- *Read: what the API returns, including server-owned fields

None of the input schemas declare teamName or createdBy. Those are
stamped by the server from the caller's token.
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import Field

from teamdesk.schemas.base import ApiModel

PRIORITY_PATTERN = r"^(low|medium|high|urgent)$"


class TeamOwnedRead(ApiModel):
    id: uuid.UUID
    team_name: str
    created_by: str
    created_at: datetime
    updated_at: datetime


# ─── Tasks ───────────────────────────────────────────────

class TaskCreate(ApiModel):
    title: str = Field(..., min_length=1, max_length=500)
    description: str = Field(default="")
    status: str = Field(default="pending", min_length=1, max_length=30)
    priority: str = Field(default="medium", pattern=PRIORITY_PATTERN)
    assignee: Optional[str] = Field(None, max_length=100)  # defaults to creator
    due_date: Optional[datetime] = None


class TaskUpdate(ApiModel):
    """Partial update — only fields present in the body are applied."""
    title: Optional[str] = Field(None, min_length=1, max_length=500)
    description: Optional[str] = None
    status: Optional[str] = Field(None, min_length=1, max_length=30)
    priority: Optional[str] = Field(None, pattern=PRIORITY_PATTERN)
    assignee: Optional[str] = Field(None, max_length=100)
    due_date: Optional[datetime] = None


class TaskRead(TeamOwnedRead):
    title: str
    description: str
    status: str
    priority: str
    assignee: str
    due_date: Optional[datetime]


# ─── Projects ────────────────────────────────────────────

class ProjectCreate(ApiModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: str = Field(default="")
    client: str = Field(default="", max_length=200)
    status: str = Field(default="planning", min_length=1, max_length=30)
    priority: str = Field(default="medium", pattern=PRIORITY_PATTERN)
    progress: int = Field(default=0, ge=0, le=100)


class ProjectUpdate(ApiModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    client: Optional[str] = Field(None, max_length=200)
    status: Optional[str] = Field(None, min_length=1, max_length=30)
    priority: Optional[str] = Field(None, pattern=PRIORITY_PATTERN)
    progress: Optional[int] = Field(None, ge=0, le=100)


class ProjectRead(TeamOwnedRead):
    name: str
    description: str
    client: str
    status: str
    priority: str
    progress: int


# ─── Leads ───────────────────────────────────────────────

class LeadCreate(ApiModel):
    company: str = Field(..., min_length=1, max_length=200)
    contact: str = Field(..., min_length=1, max_length=200)
    contact_email: str = Field(default="", max_length=255)
    status: str = Field(default="lead", min_length=1, max_length=30)
    value: float = Field(default=0, ge=0)
    probability: int = Field(default=0, ge=0, le=100)


class LeadUpdate(ApiModel):
    company: Optional[str] = Field(None, min_length=1, max_length=200)
    contact: Optional[str] = Field(None, min_length=1, max_length=200)
    contact_email: Optional[str] = Field(None, max_length=255)
    status: Optional[str] = Field(None, min_length=1, max_length=30)
    value: Optional[float] = Field(None, ge=0)
    probability: Optional[int] = Field(None, ge=0, le=100)


class LeadRead(TeamOwnedRead):
    company: str
    contact: str
    contact_email: str
    status: str
    value: float
    probability: int
