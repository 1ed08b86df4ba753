"""Tenant membership model linking employees to tenants and branches."""

from sqlalchemy import String, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import TYPE_CHECKING

from teamsync.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from teamsync.models.user import User
    from teamsync.models.tenant import Tenant
    from teamsync.models.branch import Branch


class TenantMembership(Base, TimestampMixin):
    """
    Join table linking users to tenants.

    The shape allows many tenants per user, but in practice an employee
    has a single active membership. The optional branch_id places the
    employee at one branch, which is how client admins see employees.

    Constraints:
    - Unique(tenant_id, user_id) - one membership per user per tenant
    """

    __tablename__ = "tenant_memberships"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    tenant_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("tenants.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    branch_id: Mapped[str | None] = mapped_column(
        String(64),
        ForeignKey("branches.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    # Relationships
    tenant: Mapped["Tenant"] = relationship("Tenant", back_populates="memberships")
    user: Mapped["User"] = relationship("User", back_populates="membership")
    branch: Mapped["Branch | None"] = relationship("Branch")

    # Constraints
    __table_args__ = (
        UniqueConstraint("tenant_id", "user_id", name="uq_tenant_user"),
    )

    def __repr__(self) -> str:
        return f"<TenantMembership(tenant_id='{self.tenant_id}', user_id='{self.user_id}')>"
