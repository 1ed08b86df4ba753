from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from teamsync.database import get_db
from teamsync.dependencies import Pagination, get_current_actor, get_pagination
from teamsync.models.actor import SessionUser
from teamsync.models.assignment import AssignmentStatus
from teamsync.schemas.assignment_schemas import AssignmentCreate, AssignmentResponse, AssignmentUpdate
from teamsync.schemas.common import DataResponse, DeleteAck, ListResponse, PaginationMeta
from teamsync.services.assignment_service import AssignmentService

router = APIRouter()


@router.get("", response_model=ListResponse[AssignmentResponse])
def list_assignments(
    tenant_id: str | None = Query(None, alias="tenantId"),
    client_id: str | None = Query(None, alias="clientId"),
    event_id: str | None = Query(None, alias="eventId"),
    branch_id: str | None = Query(None, alias="branchId"),
    assignment_status: AssignmentStatus | None = Query(None, alias="status"),
    pagination: Pagination = Depends(get_pagination),
    actor: SessionUser = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    """
    List assignments visible to the actor.

    - Employees only see their own assignments
    """
    service = AssignmentService(db)
    assignments, total = service.list_assignments(
        actor,
        tenant_id=tenant_id,
        client_id=client_id,
        event_id=event_id,
        branch_id=branch_id,
        status=assignment_status,
        page=pagination.page,
        limit=pagination.limit,
    )
    return {"data": assignments, "meta": PaginationMeta.build(total, pagination.page, pagination.limit)}


@router.post("", response_model=DataResponse[AssignmentResponse], status_code=status.HTTP_201_CREATED)
def create_assignment(
    data: AssignmentCreate,
    actor: SessionUser = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    """Assign an employee to an event (starts pending)"""
    service = AssignmentService(db)
    return {"data": service.create_assignment(data, actor)}


@router.get("/{assignment_id}", response_model=DataResponse[AssignmentResponse])
def get_assignment(
    assignment_id: str,
    actor: SessionUser = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    service = AssignmentService(db)
    return {"data": service.get_assignment(assignment_id, actor)}


@router.patch("/{assignment_id}", response_model=DataResponse[AssignmentResponse])
def update_assignment(
    assignment_id: str,
    data: AssignmentUpdate,
    actor: SessionUser = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    """
    Update an assignment.

    - Only the assigned employee accepts or rejects a pending assignment
    - Only tenant admins change dates or complete an accepted assignment
    - Rejected and completed assignments cannot change status
    """
    service = AssignmentService(db)
    return {"data": service.update_assignment(assignment_id, data, actor)}


@router.delete("/{assignment_id}", response_model=DataResponse[DeleteAck])
def delete_assignment(
    assignment_id: str,
    actor: SessionUser = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    service = AssignmentService(db)
    service.delete_assignment(assignment_id, actor)
    return {"data": DeleteAck(id=assignment_id)}
