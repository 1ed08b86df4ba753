from sqlalchemy import String, Text, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import TYPE_CHECKING

from teamsync.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from teamsync.models.tenant import Tenant
    from teamsync.models.branch import Branch
    from teamsync.models.contract import Contract
    from teamsync.models.user import User


class Client(Base, TimestampMixin):
    """
    Customer of a tenant.

    A client belongs to exactly one tenant. The user referenced by
    admin_id is the client admin, whose scope the session resolver
    derives from this column.
    """

    __tablename__ = "clients"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    tenant_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("tenants.id", ondelete="CASCADE"),
        nullable=False,
        index=True,  # Critical for multi-tenant queries
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str | None] = mapped_column(String(20), nullable=True)
    address: Mapped[str | None] = mapped_column(Text, nullable=True)
    admin_id: Mapped[str | None] = mapped_column(
        String(64), ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True
    )

    # Relationships
    tenant: Mapped["Tenant"] = relationship("Tenant", back_populates="clients")
    admin: Mapped["User | None"] = relationship("User")
    branches: Mapped[list["Branch"]] = relationship(
        "Branch",
        back_populates="client",
        cascade="all, delete-orphan",
    )
    contracts: Mapped[list["Contract"]] = relationship(
        "Contract",
        back_populates="client",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        UniqueConstraint("tenant_id", "name", name="uq_client_tenant_name"),
    )

    @property
    def tenant_name(self) -> str | None:
        return self.tenant.name if self.tenant else None

    @property
    def admin_name(self) -> str | None:
        return self.admin.name if self.admin else None

    def __repr__(self) -> str:
        return f"<Client(id='{self.id}', tenant_id='{self.tenant_id}')>"
