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
from teamsync.core.exceptions import DuplicateNameException, NotFoundException, ValidationException
from teamsync.core.identifiers import generate_id
from teamsync.core.lifecycle import check_event_transition
from teamsync.models.actor import SessionUser
from teamsync.models.base import as_utc
from teamsync.models.event import Event, EventStatus
from teamsync.repositories.branch_repository import BranchRepository
from teamsync.repositories.client_repository import ClientRepository
from teamsync.repositories.event_repository import EventRepository
from teamsync.schemas.event_schemas import EventCreate, EventUpdate
from teamsync.services.base import apply_changes, get_accessible


def _check_time_range(start_time: datetime, end_time: datetime) -> None:
    if as_utc(start_time) >= as_utc(end_time):
        raise ValidationException("Event start time must be before end time")


class EventService:
    """Service layer for event business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = EventRepository(db)
        self.client_repo = ClientRepository(db)
        self.branch_repo = BranchRepository(db)

    def list_events(
        self,
        actor: SessionUser,
        tenant_id: str | None = None,
        client_id: str | None = None,
        branch_id: str | None = None,
        status: EventStatus | None = None,
        start_from: datetime | None = None,
        start_to: datetime | None = None,
        search: str | None = None,
        page: int = 1,
        limit: int = 10,
    ) -> tuple[list[Event], int]:
        requested = ListScope(tenant_id=tenant_id, client_id=client_id)
        forced = resolve_list_scope(actor, ResourceKind.EVENT, requested)
        return self.repo.get_with_filters(
            forced,
            requested,
            branch_id=branch_id,
            status=status,
            start_from=start_from,
            start_to=start_to,
            search=search,
            page=page,
            limit=limit,
        )

    def get_event(self, event_id: str, actor: SessionUser) -> Event:
        return get_accessible(self.repo, ResourceKind.EVENT, event_id, actor, Operation.READ)

    def create_event(self, data: EventCreate, actor: SessionUser) -> Event:
        """
        Schedule an event at a branch of a client.

        Tenant is taken from the client. The branch must belong to that
        client.

        Raises:
            ForbiddenException: Role cannot create events or client out of scope
            NotFoundException: Client or branch does not exist
            ValidationException: Bad time range or branch of another client
            DuplicateNameException: Name already used by the client
        """
        require(actor, ResourceKind.EVENT, Operation.CREATE)

        client = self.client_repo.get_by_id(data.client_id)
        if client is None:
            raise NotFoundException(f"Client {data.client_id} not found")
        ensure_resource_access(
            actor, ResourceKind.EVENT, Operation.CREATE, self.client_repo.scope_of(client)
        )

        branch = self.branch_repo.get_by_id(data.branch_id)
        if branch is None:
            raise NotFoundException(f"Branch {data.branch_id} not found")
        if branch.client_id != client.id:
            raise ValidationException("Branch does not belong to this client")

        _check_time_range(data.start_time, data.end_time)
        if self.repo.name_exists(client.id, data.name):
            raise DuplicateNameException("event", f"Event '{data.name}' already exists for this client")

        event = Event(
            id=generate_id("event"),
            tenant_id=client.tenant_id,
            client_id=client.id,
            branch_id=branch.id,
            name=data.name,
            description=data.description,
            start_time=data.start_time,
            end_time=data.end_time,
            status=EventStatus.SCHEDULED,
        )
        return self.repo.create(event)

    def update_event(self, event_id: str, data: EventUpdate, actor: SessionUser) -> Event:
        """
        Update an event (only provided fields).

        Status changes follow the event lifecycle.

        Raises:
            InvalidStatusException: Transition outside the lifecycle
        """
        event = get_accessible(self.repo, ResourceKind.EVENT, event_id, actor, Operation.UPDATE)
        changes = data.model_dump(exclude_unset=True)
        ensure_fields_writable(actor, ResourceKind.EVENT, changes)

        for field in ("name", "start_time", "end_time", "status"):
            if field in changes and changes[field] is None:
                changes.pop(field)

        if "name" in changes and self.repo.name_exists(event.client_id, changes["name"], exclude_id=event.id):
            raise DuplicateNameException("event", f"Event '{changes['name']}' already exists for this client")

        if "start_time" in changes or "end_time" in changes:
            _check_time_range(
                changes.get("start_time", event.start_time),
                changes.get("end_time", event.end_time),
            )

        if "status" in changes and not check_event_transition(event.status, changes["status"]):
            changes.pop("status")

        apply_changes(event, changes)
        return self.repo.update(event)

    def delete_event(self, event_id: str, actor: SessionUser) -> None:
        """Delete event and its assignments"""
        event = get_accessible(self.repo, ResourceKind.EVENT, event_id, actor, Operation.DELETE)
        self.repo.delete(event)
