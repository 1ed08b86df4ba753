from teamsync.core.authorization import ListScope, ResourceScope
from teamsync.models.assignment import Assignment, AssignmentStatus
from teamsync.repositories.base import ScopedRepository


class AssignmentRepository(ScopedRepository[Assignment]):
    """Repository for Assignment data access"""

    model = Assignment

    def scope_columns(self) -> dict:
        return {
            "tenant_id": Assignment.tenant_id,
            "client_id": Assignment.client_id,
            "employee_id": Assignment.employee_id,
        }

    def scope_of(self, assignment: Assignment) -> ResourceScope:
        return ResourceScope(
            tenant_id=assignment.tenant_id,
            client_id=assignment.client_id,
            employee_id=assignment.employee_id,
        )

    def exists_for(self, employee_id: str, event_id: str) -> bool:
        """Check whether the employee is already assigned to the event"""
        return (
            self.db.query(Assignment.id)
            .filter(Assignment.employee_id == employee_id, Assignment.event_id == event_id)
            .first()
            is not None
        )

    def get_with_filters(
        self,
        forced: ListScope,
        requested: ListScope,
        event_id: str | None = None,
        branch_id: str | None = None,
        status: AssignmentStatus | None = None,
        page: int = 1,
        limit: int = 10,
    ) -> tuple[list[Assignment], int]:
        """List assignments inside the forced scope, newest first"""
        query = self.apply_scopes(self.base_query(), forced, requested)

        if event_id is not None:
            query = query.filter(Assignment.event_id == event_id)

        if branch_id is not None:
            query = query.filter(Assignment.branch_id == branch_id)

        if status is not None:
            query = query.filter(Assignment.status == status)

        query = query.order_by(Assignment.start_date.desc(), Assignment.id)
        return self.paginate(query, page, limit)
