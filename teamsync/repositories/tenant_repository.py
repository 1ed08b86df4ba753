"""Repository for Tenant model operations."""

from sqlalchemy import func
from teamsync.core.authorization import ListScope, ResourceScope
from teamsync.models.tenant import Tenant
from teamsync.repositories.base import ScopedRepository


class TenantRepository(ScopedRepository[Tenant]):
    """Repository for Tenant model operations"""

    model = Tenant

    def scope_columns(self) -> dict:
        return {"tenant_id": Tenant.id}

    def scope_of(self, tenant: Tenant) -> ResourceScope:
        return ResourceScope(tenant_id=tenant.id)

    def get_by_stripe_customer_id(self, customer_id: str) -> Tenant | None:
        return self.db.query(Tenant).filter(Tenant.stripe_customer_id == customer_id).first()

    def get_by_admin_id(self, user_id: str) -> Tenant | None:
        """
        Get the tenant a user administers.

        Args:
            user_id: Id of the tenant admin

        Returns:
            First tenant whose admin_id is the user, or None
        """
        return (
            self.db.query(Tenant)
            .filter(Tenant.admin_id == user_id)
            .order_by(Tenant.created_at)
            .first()
        )

    def name_exists(self, name: str, exclude_id: str | None = None) -> bool:
        """Check global tenant name uniqueness (case-insensitive)"""
        query = self.db.query(Tenant.id).filter(func.lower(Tenant.name) == name.lower())
        if exclude_id is not None:
            query = query.filter(Tenant.id != exclude_id)
        return query.first() is not None

    def get_with_filters(
        self,
        forced: ListScope,
        search: str | None = None,
        page: int = 1,
        limit: int = 10,
    ) -> tuple[list[Tenant], int]:
        """List tenants inside the forced scope (a single tenant for its admin)"""
        query = self.apply_scopes(self.base_query(), forced)
        if search:
            query = query.filter(Tenant.name.ilike(f"%{search}%"))
        query = query.order_by(Tenant.created_at.desc(), Tenant.id)
        return self.paginate(query, page, limit)

    def clear_plan(self, plan_id: str) -> int:
        """Detach every tenant from a plan without committing"""
        return (
            self.db.query(Tenant)
            .filter(Tenant.plan_id == plan_id)
            .update({Tenant.plan_id: None}, synchronize_session="fetch")
        )
