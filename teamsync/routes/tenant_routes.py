from fastapi import APIRouter, BackgroundTasks, Depends, Query, status
from sqlalchemy.orm import Session

from teamsync.database import get_db
from teamsync.dependencies import (
    Pagination,
    get_current_actor,
    get_email_service,
    get_pagination,
    get_payment_gateway,
)
from teamsync.integrations.email import EmailService
from teamsync.integrations.payments import StripeGateway
from teamsync.models.actor import SessionUser
from teamsync.schemas.common import DataResponse, DeleteAck, ListResponse, PaginationMeta
from teamsync.schemas.tenant_schemas import (
    TenantCreate,
    TenantPlanResponse,
    TenantPlanUpdate,
    TenantResponse,
    TenantUpdate,
)
from teamsync.services.tenant_service import TenantService

router = APIRouter()


@router.get("", response_model=ListResponse[TenantResponse])
def list_tenants(
    search: str | None = Query(None, description="Search tenant name"),
    pagination: Pagination = Depends(get_pagination),
    actor: SessionUser = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    """
    List tenants.

    Super admins see every tenant; a tenant admin sees only the tenant
    it administers.
    """
    service = TenantService(db)
    tenants, total = service.list_tenants(
        actor, search=search, page=pagination.page, limit=pagination.limit
    )
    return {"data": tenants, "meta": PaginationMeta.build(total, pagination.page, pagination.limit)}


@router.post("", response_model=DataResponse[TenantResponse], status_code=status.HTTP_201_CREATED)
def create_tenant(
    data: TenantCreate,
    actor: SessionUser = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    """
    Create a tenant.

    - **Requires super_admin**
    - Tenant names are globally unique
    """
    service = TenantService(db)
    return {"data": service.create_tenant(data, actor)}


@router.get("/{tenant_id}", response_model=DataResponse[TenantResponse])
def get_tenant(
    tenant_id: str,
    actor: SessionUser = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    """Get tenant details with admin and plan names"""
    service = TenantService(db)
    return {"data": service.get_tenant(tenant_id, actor)}


@router.patch("/{tenant_id}", response_model=DataResponse[TenantResponse])
def update_tenant(
    tenant_id: str,
    data: TenantUpdate,
    actor: SessionUser = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    """
    Update tenant details.

    - Tenant admins may edit their own tenant but not change adminId
    """
    service = TenantService(db)
    return {"data": service.update_tenant(tenant_id, data, actor)}


@router.delete("/{tenant_id}", response_model=DataResponse[DeleteAck])
def delete_tenant(
    tenant_id: str,
    actor: SessionUser = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    """
    Delete a tenant and everything it owns.

    - **Requires super_admin**
    """
    service = TenantService(db)
    service.delete_tenant(tenant_id, actor)
    return {"data": DeleteAck(id=tenant_id)}


@router.get("/{tenant_id}/plan", response_model=DataResponse[TenantPlanResponse])
def get_tenant_plan(
    tenant_id: str,
    actor: SessionUser = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    """Get the tenant's current plan (null when none)"""
    service = TenantService(db)
    return {"data": service.get_tenant_plan(tenant_id, actor)}


@router.put("/{tenant_id}/plan", response_model=DataResponse[TenantPlanResponse])
def change_tenant_plan(
    tenant_id: str,
    data: TenantPlanUpdate,
    background_tasks: BackgroundTasks,
    actor: SessionUser = Depends(get_current_actor),
    payments: StripeGateway = Depends(get_payment_gateway),
    email_service: EmailService = Depends(get_email_service),
    db: Session = Depends(get_db),
):
    """
    Switch the tenant to another plan.

    - The plan must exist and be active
    - Paid plans get exactly one new subscription; the old one is cancelled
    - A payment failure reverts the plan and returns PAYMENT_FAILED (502)
    - A confirmation email is sent in the background
    """
    service = TenantService(db, payments, email_service)
    return {"data": service.change_plan(tenant_id, data, actor, background_tasks)}
