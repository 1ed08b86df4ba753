from datetime import datetime

from sqlalchemy.orm import Session

from teamsync.core.authorization import (
    ListScope,
    Operation,
    ResourceKind,
    ensure_fields_writable,
    ensure_resource_access,
    require,
    resolve_list_scope,
)
from teamsync.core.exceptions import NotFoundException, ValidationException
from teamsync.core.identifiers import generate_id
from teamsync.core.lifecycle import check_assignment_transition
from teamsync.models.actor import SessionUser
from teamsync.models.assignment import Assignment, AssignmentStatus
from teamsync.models.base import as_utc
from teamsync.repositories.assignment_repository import AssignmentRepository
from teamsync.repositories.employee_repository import EmployeeRepository
from teamsync.repositories.event_repository import EventRepository
from teamsync.schemas.assignment_schemas import AssignmentCreate, AssignmentUpdate
from teamsync.services.base import get_accessible


def _check_date_range(start_date: datetime, end_date: datetime | None) -> None:
    if end_date is not None and as_utc(end_date) < as_utc(start_date):
        raise ValidationException("Assignment end date must not be before its start date")


class AssignmentService:
    """Service layer for assignment business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = AssignmentRepository(db)
        self.event_repo = EventRepository(db)
        self.employee_repo = EmployeeRepository(db)

    def list_assignments(
        self,
        actor: SessionUser,
        tenant_id: str | None = None,
        client_id: str | None = None,
        event_id: str | None = None,
        branch_id: str | None = None,
        status: AssignmentStatus | None = None,
        page: int = 1,
        limit: int = 10,
    ) -> tuple[list[Assignment], int]:
        """
        List assignments visible to the actor.

        Employees only ever see their own assignments.
        """
        requested = ListScope(tenant_id=tenant_id, client_id=client_id)
        forced = resolve_list_scope(actor, ResourceKind.ASSIGNMENT, requested)
        return self.repo.get_with_filters(
            forced,
            requested,
            event_id=event_id,
            branch_id=branch_id,
            status=status,
            page=page,
            limit=limit,
        )

    def get_assignment(self, assignment_id: str, actor: SessionUser) -> Assignment:
        return get_accessible(self.repo, ResourceKind.ASSIGNMENT, assignment_id, actor, Operation.READ)

    def create_assignment(self, data: AssignmentCreate, actor: SessionUser) -> Assignment:
        """
        Assign an employee to an event.

        Tenant, client and branch keys are copied from the event. The
        assignment starts pending; start_date defaults to the event start.

        Raises:
            ForbiddenException: Role cannot create assignments or event out of scope
            NotFoundException: Event or employee does not exist
            ValidationException: Employee outside the event's tenant,
                already assigned, or bad date range
        """
        require(actor, ResourceKind.ASSIGNMENT, Operation.CREATE)

        event = self.event_repo.get_by_id(data.event_id)
        if event is None:
            raise NotFoundException(f"Event {data.event_id} not found")
        ensure_resource_access(
            actor, ResourceKind.ASSIGNMENT, Operation.CREATE, self.event_repo.scope_of(event)
        )

        employee = self.employee_repo.get_by_id(data.employee_id)
        if employee is None:
            raise NotFoundException(f"Employee {data.employee_id} not found")
        if employee.tenant_id != event.tenant_id:
            raise ValidationException("Employee is not a member of the event's tenant")

        if self.repo.exists_for(employee.id, event.id):
            raise ValidationException(
                "Employee is already assigned to this event", code="DUPLICATE_ASSIGNMENT"
            )

        start_date = data.start_date or event.start_time
        _check_date_range(start_date, data.end_date)

        assignment = Assignment(
            id=generate_id("assignment"),
            employee_id=employee.id,
            event_id=event.id,
            tenant_id=event.tenant_id,
            client_id=event.client_id,
            branch_id=event.branch_id,
            start_date=start_date,
            end_date=data.end_date,
            status=AssignmentStatus.PENDING,
        )
        return self.repo.create(assignment)

    def update_assignment(self, assignment_id: str, data: AssignmentUpdate, actor: SessionUser) -> Assignment:
        """
        Update an assignment.

        Checks run in order: existence, scope, writable fields, then the
        status lifecycle. Employees may only send status, and only for
        their own pending assignments.

        Raises:
            NotFoundException: Unknown id
            ForbiddenException: Out of scope, restricted field, or wrong
                actor for the transition
            InvalidStatusException: Transition outside the lifecycle or
                from a terminal state
        """
        assignment = get_accessible(self.repo, ResourceKind.ASSIGNMENT, assignment_id, actor, Operation.UPDATE)
        changes = data.model_dump(exclude_unset=True)
        ensure_fields_writable(actor, ResourceKind.ASSIGNMENT, changes)

        status = changes.pop("status", None)
        if status is not None and check_assignment_transition(
            actor, assignment.employee_id, assignment.status, status
        ):
            assignment.status = status

        if "start_date" in changes and changes["start_date"] is None:
            raise ValidationException("start_date cannot be null")
        if changes:
            _check_date_range(
                changes.get("start_date", assignment.start_date),
                changes.get("end_date", assignment.end_date),
            )
            for field, value in changes.items():
                setattr(assignment, field, value)

        return self.repo.update(assignment)

    def delete_assignment(self, assignment_id: str, actor: SessionUser) -> None:
        assignment = get_accessible(self.repo, ResourceKind.ASSIGNMENT, assignment_id, actor, Operation.DELETE)
        self.repo.delete(assignment)
