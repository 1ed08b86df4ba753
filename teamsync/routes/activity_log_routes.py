from datetime import datetime

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from teamsync.database import get_db
from teamsync.dependencies import Pagination, get_current_actor, get_pagination
from teamsync.models.activity_log import ActivityType
from teamsync.models.actor import SessionUser
from teamsync.schemas.activity_log_schemas import ActivityLogResponse
from teamsync.schemas.common import DataResponse, DeleteAck, ListResponse, PaginationMeta
from teamsync.services.activity_log_service import ActivityLogService

router = APIRouter()


@router.get("", response_model=ListResponse[ActivityLogResponse])
def list_activity_logs(
    tenant_id: str | None = Query(None, alias="tenantId"),
    user_id: str | None = Query(None, alias="userId"),
    action: ActivityType | None = Query(None),
    entity: str | None = Query(None, description="Entity type, e.g. client"),
    start_date: datetime | None = Query(None, alias="startDate"),
    end_date: datetime | None = Query(None, alias="endDate"),
    pagination: Pagination = Depends(get_pagination),
    actor: SessionUser = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    """List audit entries visible to the actor, newest first"""
    service = ActivityLogService(db)
    logs, total = service.list_logs(
        actor,
        tenant_id=tenant_id,
        user_id=user_id,
        action=action,
        entity=entity,
        start_date=start_date,
        end_date=end_date,
        page=pagination.page,
        limit=pagination.limit,
    )
    return {"data": logs, "meta": PaginationMeta.build(total, pagination.page, pagination.limit)}


@router.get("/{log_id}", response_model=DataResponse[ActivityLogResponse])
def get_activity_log(
    log_id: str,
    actor: SessionUser = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    service = ActivityLogService(db)
    return {"data": service.get_log(log_id, actor)}


@router.delete("/{log_id}", response_model=DataResponse[DeleteAck])
def delete_activity_log(
    log_id: str,
    actor: SessionUser = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    service = ActivityLogService(db)
    service.delete_log(log_id, actor)
    return {"data": DeleteAck(id=log_id)}
