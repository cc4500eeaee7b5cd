"""Task, Project, and Lead API routes.

Learn: The three resources share one design, so they share one router
factory. Each call to resource_router() wires a TeamScopedStore
subclass to five endpoints:

    GET    /{plural}           → list (caller's team only)
    GET    /{plural}/{id}      → one record
    POST   /{plural}           → create (201)
    PUT    /{plural}/{id}      → partial update
    DELETE /{plural}/{id}      → delete (204)

Routes only translate HTTP to store calls. Team scoping, NotFound,
and NoTeam are all decided by the store. Ids are taken as plain
strings so a malformed id is a 404 like any other unknown id.
"""

from fastapi import APIRouter, Depends, Response
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from teamdesk.auth.dependencies import CurrentIdentity, get_current_user
from teamdesk.db.engine import get_db
from teamdesk.schemas.resources import (
    LeadCreate,
    LeadRead,
    LeadUpdate,
    ProjectCreate,
    ProjectRead,
    ProjectUpdate,
    TaskCreate,
    TaskRead,
    TaskUpdate,
)
from teamdesk.services.resource_service import (
    LeadStore,
    ProjectStore,
    TaskStore,
    TeamScopedStore,
)


def resource_router(
    plural: str,
    store_cls: type[TeamScopedStore],
    create_schema: type[BaseModel],
    update_schema: type[BaseModel],
    read_schema: type[BaseModel],
) -> APIRouter:
    router = APIRouter(prefix=f"/{plural}")

    def _store(db: AsyncSession = Depends(get_db)) -> TeamScopedStore:
        return store_cls(db)

    @router.get("", response_model=list[read_schema], name=f"list_{plural}")
    async def list_records(
        identity: CurrentIdentity = Depends(get_current_user),
        store: TeamScopedStore = Depends(_store),
    ):
        return await store.list(identity)

    @router.get("/{record_id}", response_model=read_schema, name=f"get_{plural}")
    async def get_record(
        record_id: str,
        identity: CurrentIdentity = Depends(get_current_user),
        store: TeamScopedStore = Depends(_store),
    ):
        return await store.get(identity, record_id)

    @router.post(
        "", response_model=read_schema, status_code=201, name=f"create_{plural}"
    )
    async def create_record(
        body: create_schema,
        identity: CurrentIdentity = Depends(get_current_user),
        store: TeamScopedStore = Depends(_store),
    ):
        return await store.create(identity, body.model_dump())

    @router.put("/{record_id}", response_model=read_schema, name=f"update_{plural}")
    async def update_record(
        record_id: str,
        body: update_schema,
        identity: CurrentIdentity = Depends(get_current_user),
        store: TeamScopedStore = Depends(_store),
    ):
        return await store.update(
            identity, record_id, body.model_dump(exclude_unset=True)
        )

    @router.delete("/{record_id}", status_code=204, name=f"delete_{plural}")
    async def delete_record(
        record_id: str,
        identity: CurrentIdentity = Depends(get_current_user),
        store: TeamScopedStore = Depends(_store),
    ):
        await store.delete(identity, record_id)
        return Response(status_code=204)

    return router


tasks_router = resource_router("tasks", TaskStore, TaskCreate, TaskUpdate, TaskRead)
projects_router = resource_router(
    "projects", ProjectStore, ProjectCreate, ProjectUpdate, ProjectRead
)
leads_router = resource_router("leads", LeadStore, LeadCreate, LeadUpdate, LeadRead)
