"""Repository for TenantMembership model operations."""

from teamsync.models.tenant_membership import TenantMembership
from teamsync.repositories.base import BaseRepository


class TenantMembershipRepository(BaseRepository[TenantMembership]):
    """Repository for TenantMembership model operations"""

    model = TenantMembership

    def get_membership(self, user_id: str, tenant_id: str) -> TenantMembership | None:
        """
        Get membership for a specific user in a specific tenant.

        Args:
            user_id: User ID
            tenant_id: Tenant ID

        Returns:
            TenantMembership object or None if not found
        """
        return (
            self.db.query(TenantMembership)
            .filter(
                TenantMembership.user_id == user_id,
                TenantMembership.tenant_id == tenant_id,
            )
            .first()
        )

    def get_user_membership(self, user_id: str) -> TenantMembership | None:
        """
        Get the active membership of a user.

        Employees belong to a single tenant in practice; the oldest
        membership wins if several exist.
        """
        return (
            self.db.query(TenantMembership)
            .filter(TenantMembership.user_id == user_id)
            .order_by(TenantMembership.created_at)
            .first()
        )
