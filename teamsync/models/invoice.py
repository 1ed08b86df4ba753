from datetime import datetime
from decimal import Decimal
from sqlalchemy import String, Numeric, ForeignKey, DateTime, Boolean
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import TYPE_CHECKING

from teamsync.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from teamsync.models.contract import Contract


class Invoice(Base, TimestampMixin):
    """
    Bill issued under a contract.

    Invoices carry no scope keys of their own: tenant and client are
    derived through the parent contract.
    """

    __tablename__ = "invoices"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    contract_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("contracts.id", ondelete="CASCADE"), nullable=False, index=True
    )
    amount: Mapped[Decimal] = mapped_column(Numeric(precision=15, scale=2), nullable=False)
    due_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    paid: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    paid_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    # Relationships
    contract: Mapped["Contract"] = relationship("Contract", back_populates="invoices")

    @property
    def tenant_id(self) -> str | None:
        return self.contract.tenant_id if self.contract else None

    @property
    def client_id(self) -> str | None:
        return self.contract.client_id if self.contract else None

    @property
    def tenant_name(self) -> str | None:
        return self.contract.tenant_name if self.contract else None

    @property
    def client_name(self) -> str | None:
        return self.contract.client_name if self.contract else None
