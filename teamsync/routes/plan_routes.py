from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from teamsync.database import get_db
from teamsync.dependencies import Pagination, get_current_actor, get_pagination
from teamsync.models.actor import SessionUser
from teamsync.schemas.common import DataResponse, DeleteAck, ListResponse, PaginationMeta
from teamsync.schemas.plan_schemas import PlanCreate, PlanResponse, PlanUpdate
from teamsync.services.plan_service import PlanService

router = APIRouter()


@router.get("", response_model=ListResponse[PlanResponse])
def list_plans(
    is_active: bool | None = Query(None, alias="isActive"),
    search: str | None = Query(None, description="Search plan name"),
    pagination: Pagination = Depends(get_pagination),
    actor: SessionUser = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    """List the plan catalogue (readable by every role)"""
    service = PlanService(db)
    plans, total = service.list_plans(
        actor, is_active=is_active, search=search, page=pagination.page, limit=pagination.limit
    )
    return {"data": plans, "meta": PaginationMeta.build(total, pagination.page, pagination.limit)}


@router.post("", response_model=DataResponse[PlanResponse], status_code=status.HTTP_201_CREATED)
def create_plan(
    data: PlanCreate,
    actor: SessionUser = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    """Add a plan to the catalogue (super admin only)"""
    service = PlanService(db)
    return {"data": service.create_plan(data, actor)}


@router.get("/{plan_id}", response_model=DataResponse[PlanResponse])
def get_plan(
    plan_id: str,
    actor: SessionUser = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    service = PlanService(db)
    return {"data": service.get_plan(plan_id, actor)}


@router.patch("/{plan_id}", response_model=DataResponse[PlanResponse])
def update_plan(
    plan_id: str,
    data: PlanUpdate,
    actor: SessionUser = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    service = PlanService(db)
    return {"data": service.update_plan(plan_id, data, actor)}


@router.delete("/{plan_id}", response_model=DataResponse[DeleteAck])
def delete_plan(
    plan_id: str,
    actor: SessionUser = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    service = PlanService(db)
    service.delete_plan(plan_id, actor)
    return {"data": DeleteAck(id=plan_id)}
