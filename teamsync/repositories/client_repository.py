from sqlalchemy import func

from teamsync.core.authorization import ListScope, ResourceScope
from teamsync.models.client import Client
from teamsync.repositories.base import ScopedRepository


class ClientRepository(ScopedRepository[Client]):
    """Repository for Client data access"""

    model = Client

    def scope_columns(self) -> dict:
        return {"tenant_id": Client.tenant_id, "client_id": Client.id}

    def scope_of(self, client: Client) -> ResourceScope:
        return ResourceScope(tenant_id=client.tenant_id, client_id=client.id)

    def get_by_admin_id(self, user_id: str) -> Client | None:
        """Get the client a user administers (oldest first if several)"""
        return (
            self.db.query(Client)
            .filter(Client.admin_id == user_id)
            .order_by(Client.created_at)
            .first()
        )

    def name_exists(self, tenant_id: str, name: str, exclude_id: str | None = None) -> bool:
        """
        Check whether a client name is taken inside a tenant.

        Args:
            tenant_id: Tenant the name must be unique in
            name: Candidate name (case-insensitive)
            exclude_id: Client being renamed, ignored in the lookup

        Returns:
            True if another client of the tenant has the name
        """
        query = self.db.query(Client.id).filter(
            Client.tenant_id == tenant_id,
            func.lower(Client.name) == name.lower(),
        )
        if exclude_id is not None:
            query = query.filter(Client.id != exclude_id)
        return query.first() is not None

    def get_with_filters(
        self,
        forced: ListScope,
        requested: ListScope,
        search: str | None = None,
        page: int = 1,
        limit: int = 10,
    ) -> tuple[list[Client], int]:
        """
        List clients inside the forced scope.

        Args:
            forced: Scope imposed by the actor's role
            requested: Caller supplied tenantId/clientId filters
            search: Case-insensitive substring of the client name
            page: 1-based page
            limit: Page size

        Returns:
            Tuple of (clients, total count)
        """
        query = self.apply_scopes(self.base_query(), forced, requested)

        if search:
            query = query.filter(Client.name.ilike(f"%{search}%"))

        query = query.order_by(Client.created_at.desc(), Client.id)
        return self.paginate(query, page, limit)
