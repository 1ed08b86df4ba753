"""Status state machines for assignments and events."""

from enum import Enum
from typing import TypeVar

from teamsync.core.exceptions import ForbiddenException, InvalidStatusException
from teamsync.models.actor import SessionUser
from teamsync.models.assignment import AssignmentStatus
from teamsync.models.event import EventStatus

StatusT = TypeVar("StatusT", bound=Enum)

ASSIGNMENT_TRANSITIONS: dict[AssignmentStatus, frozenset[AssignmentStatus]] = {
    AssignmentStatus.PENDING: frozenset({AssignmentStatus.ACCEPTED, AssignmentStatus.REJECTED}),
    AssignmentStatus.ACCEPTED: frozenset({AssignmentStatus.COMPLETED}),
}

EVENT_TRANSITIONS: dict[EventStatus, frozenset[EventStatus]] = {
    EventStatus.SCHEDULED: frozenset({EventStatus.ONGOING, EventStatus.CANCELLED}),
    EventStatus.ONGOING: frozenset({EventStatus.COMPLETED}),
}


def is_terminal(transitions: dict[StatusT, frozenset[StatusT]], status: StatusT) -> bool:
    return not transitions.get(status)


def check_transition(
    transitions: dict[StatusT, frozenset[StatusT]],
    current: StatusT,
    target: StatusT,
    label: str,
) -> bool:
    """
    Validate a status change against a transition table.

    Re-sending the current status of a non-terminal resource is a no-op.

    Returns:
        True if the status actually changes, False for a no-op

    Raises:
        InvalidStatusException: From a terminal state, or for any pair
            not in the table
    """
    if is_terminal(transitions, current):
        raise InvalidStatusException(
            f"{label.capitalize()} is {current.value} and can no longer change status"
        )
    if target == current:
        return False
    if target not in transitions[current]:
        raise InvalidStatusException(
            f"Cannot change {label} status from {current.value} to {target.value}"
        )
    return True


def check_assignment_transition(
    actor: SessionUser,
    employee_id: str,
    current: AssignmentStatus,
    target: AssignmentStatus,
) -> bool:
    """
    Validate an assignment status change for this actor.

    Only the assigned employee answers a pending assignment. Completing
    an accepted assignment is an admin action.

    Returns:
        True if the status changes, False for a no-op

    Raises:
        InvalidStatusException: Transition not allowed by the table
        ForbiddenException: Allowed transition, wrong actor
    """
    if not check_transition(ASSIGNMENT_TRANSITIONS, current, target, "assignment"):
        return False

    if current == AssignmentStatus.PENDING:
        if not (actor.is_employee and actor.id == employee_id):
            raise ForbiddenException("Only the assigned employee can accept or reject an assignment")
    elif not (actor.is_tenant_admin or actor.is_super_admin):
        raise ForbiddenException("Only tenant admins can complete an assignment")

    return True


def check_event_transition(current: EventStatus, target: EventStatus) -> bool:
    return check_transition(EVENT_TRANSITIONS, current, target, "event")
