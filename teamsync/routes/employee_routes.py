from fastapi import APIRouter, BackgroundTasks, Depends, Query, status
from sqlalchemy.orm import Session

from teamsync.database import get_db
from teamsync.dependencies import Pagination, get_current_actor, get_email_service, get_pagination
from teamsync.integrations.email import EmailService
from teamsync.models.actor import SessionUser
from teamsync.schemas.common import DataResponse, DeleteAck, ListResponse, PaginationMeta
from teamsync.schemas.employee_schemas import EmployeeCreate, EmployeeResponse, EmployeeUpdate
from teamsync.services.employee_service import EmployeeService

router = APIRouter()


@router.get("", response_model=ListResponse[EmployeeResponse])
def list_employees(
    tenant_id: str | None = Query(None, alias="tenantId"),
    client_id: str | None = Query(None, alias="clientId"),
    branch_id: str | None = Query(None, alias="branchId"),
    is_active: bool | None = Query(None, alias="isActive"),
    search: str | None = Query(None, description="Search name or email"),
    pagination: Pagination = Depends(get_pagination),
    actor: SessionUser = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    """
    List employees visible to the actor.

    - Client admins see employees placed at branches of their client
    """
    service = EmployeeService(db)
    employees, total = service.list_employees(
        actor,
        tenant_id=tenant_id,
        client_id=client_id,
        branch_id=branch_id,
        is_active=is_active,
        search=search,
        page=pagination.page,
        limit=pagination.limit,
    )
    return {"data": employees, "meta": PaginationMeta.build(total, pagination.page, pagination.limit)}


@router.post("", response_model=DataResponse[EmployeeResponse], status_code=status.HTTP_201_CREATED)
def create_employee(
    data: EmployeeCreate,
    background_tasks: BackgroundTasks,
    actor: SessionUser = Depends(get_current_actor),
    email_service: EmailService = Depends(get_email_service),
    db: Session = Depends(get_db),
):
    """
    Onboard an employee.

    - Creates the user and its tenant membership in one transaction
    - Sends a welcome email in the background
    """
    service = EmployeeService(db, email_service)
    return {"data": service.create_employee(data, actor, background_tasks)}


@router.get("/{employee_id}", response_model=DataResponse[EmployeeResponse])
def get_employee(
    employee_id: str,
    actor: SessionUser = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    """Get an employee (employees may read their own profile)"""
    service = EmployeeService(db)
    return {"data": service.get_employee(employee_id, actor)}


@router.patch("/{employee_id}", response_model=DataResponse[EmployeeResponse])
def update_employee(
    employee_id: str,
    data: EmployeeUpdate,
    actor: SessionUser = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    """
    Update an employee.

    - Employees may update their own name and phone only
    """
    service = EmployeeService(db)
    return {"data": service.update_employee(employee_id, data, actor)}


@router.delete("/{employee_id}", response_model=DataResponse[DeleteAck])
def delete_employee(
    employee_id: str,
    actor: SessionUser = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    service = EmployeeService(db)
    service.delete_employee(employee_id, actor)
    return {"data": DeleteAck(id=employee_id)}
