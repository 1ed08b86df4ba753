from datetime import datetime

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from teamsync.database import get_db
from teamsync.dependencies import Pagination, get_current_actor, get_pagination
from teamsync.models.actor import SessionUser
from teamsync.models.event import EventStatus
from teamsync.schemas.common import DataResponse, DeleteAck, ListResponse, PaginationMeta
from teamsync.schemas.event_schemas import EventCreate, EventResponse, EventUpdate
from teamsync.services.event_service import EventService

router = APIRouter()


@router.get("", response_model=ListResponse[EventResponse])
def list_events(
    tenant_id: str | None = Query(None, alias="tenantId"),
    client_id: str | None = Query(None, alias="clientId"),
    branch_id: str | None = Query(None, alias="branchId"),
    event_status: EventStatus | None = Query(None, alias="status"),
    start_from: datetime | None = Query(None, alias="startFrom", description="Start time (inclusive)"),
    start_to: datetime | None = Query(None, alias="startTo", description="Start time (inclusive)"),
    search: str | None = Query(None, description="Search event name"),
    pagination: Pagination = Depends(get_pagination),
    actor: SessionUser = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    """List events visible to the actor, soonest first"""
    service = EventService(db)
    events, total = service.list_events(
        actor,
        tenant_id=tenant_id,
        client_id=client_id,
        branch_id=branch_id,
        status=event_status,
        start_from=start_from,
        start_to=start_to,
        search=search,
        page=pagination.page,
        limit=pagination.limit,
    )
    return {"data": events, "meta": PaginationMeta.build(total, pagination.page, pagination.limit)}


@router.post("", response_model=DataResponse[EventResponse], status_code=status.HTTP_201_CREATED)
def create_event(
    data: EventCreate,
    actor: SessionUser = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    """
    Schedule an event.

    - startTime must be before endTime
    - Event names are unique per client
    """
    service = EventService(db)
    return {"data": service.create_event(data, actor)}


@router.get("/{event_id}", response_model=DataResponse[EventResponse])
def get_event(
    event_id: str,
    actor: SessionUser = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    service = EventService(db)
    return {"data": service.get_event(event_id, actor)}


@router.patch("/{event_id}", response_model=DataResponse[EventResponse])
def update_event(
    event_id: str,
    data: EventUpdate,
    actor: SessionUser = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    """
    Update an event.

    - Status follows scheduled -> ongoing -> completed, or scheduled -> cancelled
    """
    service = EventService(db)
    return {"data": service.update_event(event_id, data, actor)}


@router.delete("/{event_id}", response_model=DataResponse[DeleteAck])
def delete_event(
    event_id: str,
    actor: SessionUser = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    service = EventService(db)
    service.delete_event(event_id, actor)
    return {"data": DeleteAck(id=event_id)}
