from datetime import datetime
from enum import Enum as PyEnum
from sqlalchemy import String, ForeignKey, DateTime, Enum, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import TYPE_CHECKING

from teamsync.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from teamsync.models.user import User
    from teamsync.models.event import Event
    from teamsync.models.client import Client
    from teamsync.models.branch import Branch


class AssignmentStatus(str, PyEnum):
    """Assignment lifecycle: pending -> accepted|rejected, accepted -> completed"""

    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    COMPLETED = "completed"


class Assignment(Base, TimestampMixin):
    """
    One employee staffed on one event.

    tenant_id, client_id and branch_id are copied from the event when the
    assignment is created so every scope key is a plain column.
    """

    __tablename__ = "assignments"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    employee_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    event_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True
    )
    tenant_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False, index=True
    )
    client_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("clients.id", ondelete="CASCADE"), nullable=False, index=True
    )
    branch_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("branches.id", ondelete="CASCADE"), nullable=False
    )
    start_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    end_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    status: Mapped[AssignmentStatus] = mapped_column(
        Enum(AssignmentStatus, native_enum=False, values_callable=lambda x: [e.value for e in x]),
        nullable=False,
        default=AssignmentStatus.PENDING,
    )

    # Relationships
    employee: Mapped["User"] = relationship("User")
    event: Mapped["Event"] = relationship("Event", back_populates="assignments")
    client: Mapped["Client"] = relationship("Client")
    branch: Mapped["Branch"] = relationship("Branch")

    __table_args__ = (
        UniqueConstraint("employee_id", "event_id", name="uq_assignment_employee_event"),
    )

    @property
    def employee_name(self) -> str | None:
        return self.employee.name if self.employee else None

    @property
    def employee_email(self) -> str | None:
        return self.employee.email if self.employee else None

    @property
    def event_name(self) -> str | None:
        return self.event.name if self.event else None

    @property
    def client_name(self) -> str | None:
        return self.client.name if self.client else None

    @property
    def branch_name(self) -> str | None:
        return self.branch.name if self.branch else None
