from datetime import datetime

from sqlalchemy import func

from teamsync.core.authorization import ListScope, ResourceScope
from teamsync.models.event import Event, EventStatus
from teamsync.repositories.base import ScopedRepository


class EventRepository(ScopedRepository[Event]):
    """Repository for Event data access"""

    model = Event

    def scope_columns(self) -> dict:
        return {"tenant_id": Event.tenant_id, "client_id": Event.client_id}

    def scope_of(self, event: Event) -> ResourceScope:
        return ResourceScope(tenant_id=event.tenant_id, client_id=event.client_id)

    def name_exists(self, client_id: str, name: str, exclude_id: str | None = None) -> bool:
        """Check event name uniqueness inside one client (case-insensitive)"""
        query = self.db.query(Event.id).filter(
            Event.client_id == client_id,
            func.lower(Event.name) == name.lower(),
        )
        if exclude_id is not None:
            query = query.filter(Event.id != exclude_id)
        return query.first() is not None

    def get_with_filters(
        self,
        forced: ListScope,
        requested: ListScope,
        branch_id: str | None = None,
        status: EventStatus | None = None,
        start_from: datetime | None = None,
        start_to: datetime | None = None,
        search: str | None = None,
        page: int = 1,
        limit: int = 10,
    ) -> tuple[list[Event], int]:
        """
        List events inside the forced scope.

        Args:
            forced: Scope imposed by the actor's role
            requested: Caller supplied tenantId/clientId filters
            branch_id: Only events at this branch
            status: Only events in this lifecycle state
            start_from: Events starting at or after (inclusive)
            start_to: Events starting at or before (inclusive)
            search: Case-insensitive substring of the event name
            page: 1-based page
            limit: Page size

        Returns:
            Tuple of (events, total count), soonest first
        """
        query = self.apply_scopes(self.base_query(), forced, requested)

        if branch_id is not None:
            query = query.filter(Event.branch_id == branch_id)

        if status is not None:
            query = query.filter(Event.status == status)

        if start_from is not None:
            query = query.filter(Event.start_time >= start_from)

        if start_to is not None:
            query = query.filter(Event.start_time <= start_to)

        if search:
            query = query.filter(Event.name.ilike(f"%{search}%"))

        query = query.order_by(Event.start_time, Event.id)
        return self.paginate(query, page, limit)
