from dataclasses import dataclass
from datetime import datetime

from sqlalchemy.orm import Session

from teamsync.core.authorization import ListScope, Operation, ResourceKind, resolve_list_scope
from teamsync.core.identifiers import generate_id
from teamsync.core.logging import get_logger
from teamsync.models.activity_log import ActivityLog, ActivityType
from teamsync.models.actor import SessionUser
from teamsync.repositories.activity_log_repository import ActivityLogRepository
from teamsync.services.base import get_accessible

logger = get_logger(__name__)


@dataclass(frozen=True)
class RequestOrigin:
    """Where a request came from, as recorded on sign-in and password entries"""

    ip_address: str | None = None
    user_agent: str | None = None


def record_activity(
    db: Session,
    action: ActivityType,
    user_id: str | None = None,
    tenant_id: str | None = None,
    entity: str | None = None,
    entity_id: str | None = None,
    details: str | None = None,
    origin: RequestOrigin | None = None,
) -> ActivityLog:
    """
    Stage an audit entry without committing.

    The entry is committed together with the write it describes, so a
    rolled back write leaves no entry behind.
    """
    origin = origin or RequestOrigin()
    log = ActivityLog(
        id=generate_id("log"),
        tenant_id=tenant_id,
        user_id=user_id,
        action=action,
        entity=entity,
        entity_id=entity_id,
        details=details,
        ip_address=origin.ip_address,
        user_agent=origin.user_agent[:255] if origin.user_agent else None,
    )
    return ActivityLogRepository(db).add(log)


class ActivityLogService:
    """Read access to the audit trail"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = ActivityLogRepository(db)

    def list_logs(
        self,
        actor: SessionUser,
        tenant_id: str | None = None,
        user_id: str | None = None,
        action: ActivityType | None = None,
        entity: str | None = None,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
        page: int = 1,
        limit: int = 10,
    ) -> tuple[list[ActivityLog], int]:
        requested = ListScope(tenant_id=tenant_id, employee_id=user_id)
        forced = resolve_list_scope(actor, ResourceKind.ACTIVITY_LOG, requested)
        return self.repo.get_with_filters(
            forced,
            requested,
            action=action,
            entity=entity,
            start_date=start_date,
            end_date=end_date,
            page=page,
            limit=limit,
        )

    def get_log(self, log_id: str, actor: SessionUser) -> ActivityLog:
        return get_accessible(self.repo, ResourceKind.ACTIVITY_LOG, log_id, actor, Operation.READ)

    def delete_log(self, log_id: str, actor: SessionUser) -> None:
        log = get_accessible(self.repo, ResourceKind.ACTIVITY_LOG, log_id, actor, Operation.DELETE)
        self.repo.delete(log)
        logger.info(f"Deleted activity log {log_id}", extra={"actor_id": actor.id})
