from datetime import datetime

from teamsync.core.authorization import ListScope, ResourceScope
from teamsync.models.activity_log import ActivityLog, ActivityType
from teamsync.repositories.base import ScopedRepository


class ActivityLogRepository(ScopedRepository[ActivityLog]):
    """Repository for the audit trail"""

    model = ActivityLog

    def scope_columns(self) -> dict:
        # The SELF scope of an entry is the user who acted
        return {"tenant_id": ActivityLog.tenant_id, "employee_id": ActivityLog.user_id}

    def scope_of(self, log: ActivityLog) -> ResourceScope:
        return ResourceScope(tenant_id=log.tenant_id, employee_id=log.user_id)

    def get_with_filters(
        self,
        forced: ListScope,
        requested: ListScope,
        action: ActivityType | None = None,
        entity: str | None = None,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
        page: int = 1,
        limit: int = 10,
    ) -> tuple[list[ActivityLog], int]:
        """
        List entries inside the forced scope, newest first.

        Args:
            forced: Scope resolved from the actor's role
            requested: tenantId / userId filters from the request
            action: Only entries of this action
            entity: Only entries about this entity type
            start_date: Inclusive lower bound on created_at
            end_date: Inclusive upper bound on created_at

        Returns:
            Tuple of (entries, total count)
        """
        query = self.apply_scopes(self.base_query(), forced, requested)

        if action is not None:
            query = query.filter(ActivityLog.action == action)
        if entity:
            query = query.filter(ActivityLog.entity == entity)
        if start_date is not None:
            query = query.filter(ActivityLog.created_at >= start_date)
        if end_date is not None:
            query = query.filter(ActivityLog.created_at <= end_date)

        query = query.order_by(ActivityLog.created_at.desc(), ActivityLog.id.desc())
        return self.paginate(query, page, limit)
