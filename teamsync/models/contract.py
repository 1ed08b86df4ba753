from datetime import datetime
from enum import Enum as PyEnum
from sqlalchemy import String, Text, ForeignKey, DateTime, Enum
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import TYPE_CHECKING

from teamsync.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from teamsync.models.tenant import Tenant
    from teamsync.models.client import Client
    from teamsync.models.invoice import Invoice


class ContractStatus(str, PyEnum):
    """Contract status enumeration"""

    ACTIVE = "active"
    EXPIRED = "expired"
    TERMINATED = "terminated"


class Contract(Base, TimestampMixin):
    """Agreement between a tenant and one of its clients."""

    __tablename__ = "contracts"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    tenant_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False, index=True
    )
    client_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("clients.id", ondelete="CASCADE"), nullable=False, index=True
    )
    start_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    end_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    terms: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[ContractStatus] = mapped_column(
        Enum(ContractStatus, native_enum=False, values_callable=lambda x: [e.value for e in x]),
        nullable=False,
        default=ContractStatus.ACTIVE,
    )

    # Relationships
    tenant: Mapped["Tenant"] = relationship("Tenant")
    client: Mapped["Client"] = relationship("Client", back_populates="contracts")
    invoices: Mapped[list["Invoice"]] = relationship(
        "Invoice",
        back_populates="contract",
        cascade="all, delete-orphan",  # Delete invoices if contract deleted
    )

    @property
    def tenant_name(self) -> str | None:
        return self.tenant.name if self.tenant else None

    @property
    def client_name(self) -> str | None:
        return self.client.name if self.client else None
