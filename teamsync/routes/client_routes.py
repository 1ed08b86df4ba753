from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from teamsync.database import get_db
from teamsync.dependencies import Pagination, get_current_actor, get_pagination
from teamsync.models.actor import SessionUser
from teamsync.schemas.client_schemas import ClientCreate, ClientResponse, ClientUpdate
from teamsync.schemas.common import DataResponse, DeleteAck, ListResponse, PaginationMeta
from teamsync.services.client_service import ClientService

router = APIRouter()


@router.get("", response_model=ListResponse[ClientResponse])
def list_clients(
    tenant_id: str | None = Query(None, alias="tenantId", description="Filter by tenant"),
    client_id: str | None = Query(None, alias="clientId", description="Filter by client"),
    search: str | None = Query(None, description="Case-insensitive name search"),
    pagination: Pagination = Depends(get_pagination),
    actor: SessionUser = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    """
    List clients visible to the actor.

    - Tenant admins only see clients of their tenant
    - Client admins only see their own client
    - Super admins must pass tenantId (or clientId)
    """
    service = ClientService(db)
    clients, total = service.list_clients(
        actor,
        tenant_id=tenant_id,
        client_id=client_id,
        search=search,
        page=pagination.page,
        limit=pagination.limit,
    )
    return {"data": clients, "meta": PaginationMeta.build(total, pagination.page, pagination.limit)}


@router.post("", response_model=DataResponse[ClientResponse], status_code=status.HTTP_201_CREATED)
def create_client(
    data: ClientCreate,
    actor: SessionUser = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    """
    Create a client and its initial one-year contract atomically.

    - Requires tenant_admin (own tenant) or super_admin (tenantId required)
    """
    service = ClientService(db)
    return {"data": service.create_client(data, actor)}


@router.get("/{client_id}", response_model=DataResponse[ClientResponse])
def get_client(
    client_id: str,
    actor: SessionUser = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    """Get a client with its tenant and admin names"""
    service = ClientService(db)
    return {"data": service.get_client(client_id, actor)}


@router.patch("/{client_id}", response_model=DataResponse[ClientResponse])
def update_client(
    client_id: str,
    data: ClientUpdate,
    actor: SessionUser = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    """Update client details (partial update)"""
    service = ClientService(db)
    return {"data": service.update_client(client_id, data, actor)}


@router.delete("/{client_id}", response_model=DataResponse[DeleteAck])
def delete_client(
    client_id: str,
    actor: SessionUser = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    """Delete a client with its branches and contracts"""
    service = ClientService(db)
    service.delete_client(client_id, actor)
    return {"data": DeleteAck(id=client_id)}
