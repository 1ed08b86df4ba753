from datetime import datetime
from enum import Enum as PyEnum
from sqlalchemy import String, Text, ForeignKey, DateTime, Enum, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import TYPE_CHECKING

from teamsync.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from teamsync.models.tenant import Tenant
    from teamsync.models.client import Client
    from teamsync.models.branch import Branch
    from teamsync.models.assignment import Assignment


class EventStatus(str, PyEnum):
    """Event lifecycle: scheduled -> ongoing -> completed, or scheduled -> cancelled"""

    SCHEDULED = "scheduled"
    ONGOING = "ongoing"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class Event(Base, TimestampMixin):
    """
    Scheduled work at a branch.

    Invariant: start_time < end_time (enforced by the event service).
    """

    __tablename__ = "events"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    tenant_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False, index=True
    )
    client_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("clients.id", ondelete="CASCADE"), nullable=False, index=True
    )
    branch_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("branches.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    start_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    end_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    status: Mapped[EventStatus] = mapped_column(
        Enum(EventStatus, native_enum=False, values_callable=lambda x: [e.value for e in x]),
        nullable=False,
        default=EventStatus.SCHEDULED,
    )

    # Relationships
    tenant: Mapped["Tenant"] = relationship("Tenant")
    client: Mapped["Client"] = relationship("Client")
    branch: Mapped["Branch"] = relationship("Branch")
    assignments: Mapped[list["Assignment"]] = relationship(
        "Assignment",
        back_populates="event",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        Index("ix_events_client_name", "client_id", "name"),
    )

    @property
    def client_name(self) -> str | None:
        return self.client.name if self.client else None

    @property
    def branch_name(self) -> str | None:
        return self.branch.name if self.branch else None

    @property
    def branch_address(self) -> str | None:
        return self.branch.address if self.branch else None
