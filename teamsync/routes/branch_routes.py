from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from teamsync.database import get_db
from teamsync.dependencies import Pagination, get_current_actor, get_pagination
from teamsync.models.actor import SessionUser
from teamsync.schemas.branch_schemas import BranchCreate, BranchResponse, BranchUpdate
from teamsync.schemas.common import DataResponse, DeleteAck, ListResponse, PaginationMeta
from teamsync.services.branch_service import BranchService

router = APIRouter()


@router.get("", response_model=ListResponse[BranchResponse])
def list_branches(
    tenant_id: str | None = Query(None, alias="tenantId"),
    client_id: str | None = Query(None, alias="clientId"),
    search: str | None = Query(None, description="Search name or address"),
    pagination: Pagination = Depends(get_pagination),
    actor: SessionUser = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    """List branches visible to the actor"""
    service = BranchService(db)
    branches, total = service.list_branches(
        actor,
        tenant_id=tenant_id,
        client_id=client_id,
        search=search,
        page=pagination.page,
        limit=pagination.limit,
    )
    return {"data": branches, "meta": PaginationMeta.build(total, pagination.page, pagination.limit)}


@router.post("", response_model=DataResponse[BranchResponse], status_code=status.HTTP_201_CREATED)
def create_branch(
    data: BranchCreate,
    actor: SessionUser = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    """
    Create a branch under a client.

    - The client must exist and be in the actor's scope
    - Client admins cannot set supervisorId
    """
    service = BranchService(db)
    return {"data": service.create_branch(data, actor)}


@router.get("/{branch_id}", response_model=DataResponse[BranchResponse])
def get_branch(
    branch_id: str,
    actor: SessionUser = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    service = BranchService(db)
    return {"data": service.get_branch(branch_id, actor)}


@router.patch("/{branch_id}", response_model=DataResponse[BranchResponse])
def update_branch(
    branch_id: str,
    data: BranchUpdate,
    actor: SessionUser = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    """Update a branch (client admins cannot change supervisorId)"""
    service = BranchService(db)
    return {"data": service.update_branch(branch_id, data, actor)}


@router.delete("/{branch_id}", response_model=DataResponse[DeleteAck])
def delete_branch(
    branch_id: str,
    actor: SessionUser = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    service = BranchService(db)
    service.delete_branch(branch_id, actor)
    return {"data": DeleteAck(id=branch_id)}
