"""Tenant model for multi-tenant isolation."""

from sqlalchemy import String, Text, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import TYPE_CHECKING

from teamsync.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from teamsync.models.tenant_membership import TenantMembership
    from teamsync.models.client import Client
    from teamsync.models.plan import Plan
    from teamsync.models.user import User


class Tenant(Base, TimestampMixin):
    """
    Multi-tenant isolation boundary (an organization).

    Clients, branches, events, assignments and contracts all belong to a
    tenant. The user referenced by admin_id is the tenant admin: the
    session resolver derives a tenant admin's scope from this column.

    Billing state mirrors the payment provider: stripe_customer_id and
    stripe_subscription_id are only written after a successful call.
    """

    __tablename__ = "tenants"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(20), nullable=True)
    address: Mapped[str | None] = mapped_column(Text, nullable=True)
    admin_id: Mapped[str | None] = mapped_column(
        String(64), ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True
    )
    plan_id: Mapped[str | None] = mapped_column(
        String(64), ForeignKey("plans.id", ondelete="SET NULL"), nullable=True
    )
    stripe_customer_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    stripe_subscription_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    subscription_status: Mapped[str | None] = mapped_column(String(50), nullable=True)

    # Relationships
    admin: Mapped["User | None"] = relationship("User")
    plan: Mapped["Plan | None"] = relationship("Plan")
    memberships: Mapped[list["TenantMembership"]] = relationship(
        "TenantMembership",
        back_populates="tenant",
        cascade="all, delete-orphan",
    )
    clients: Mapped[list["Client"]] = relationship(
        "Client",
        back_populates="tenant",
        cascade="all, delete-orphan",
    )

    @property
    def admin_name(self) -> str | None:
        return self.admin.name if self.admin else None

    @property
    def plan_name(self) -> str | None:
        return self.plan.name if self.plan else None

    def __repr__(self) -> str:
        return f"<Tenant(id='{self.id}', name='{self.name}')>"
