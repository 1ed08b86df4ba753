from datetime import datetime
from enum import Enum as PyEnum
from sqlalchemy import String, Text, ForeignKey, DateTime, Enum
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import TYPE_CHECKING

from teamsync.models.base import Base, utcnow

if TYPE_CHECKING:
    from teamsync.models.tenant import Tenant
    from teamsync.models.user import User


class ActivityType(str, PyEnum):
    """Audited actions"""

    SIGN_IN = "sign_in"
    PASSWORD_CHANGED = "password_changed"
    PLAN_CHANGED = "plan_changed"
    SUBSCRIPTION_SYNCED = "subscription_synced"
    TENANT_CREATED = "tenant_created"
    TENANT_DELETED = "tenant_deleted"
    CLIENT_CREATED = "client_created"
    CLIENT_DELETED = "client_deleted"
    EMPLOYEE_CREATED = "employee_created"
    EMPLOYEE_DELETED = "employee_deleted"


class ActivityLog(Base):
    """
    One entry of the audit trail.

    Rows outlive the tenant and user they mention: both references are
    set to NULL when the referenced row is deleted. user_id is the actor,
    None for provider-initiated changes.
    """

    __tablename__ = "activity_logs"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    tenant_id: Mapped[str | None] = mapped_column(
        String(64), ForeignKey("tenants.id", ondelete="SET NULL"), nullable=True, index=True
    )
    user_id: Mapped[str | None] = mapped_column(
        String(64), ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True
    )
    action: Mapped[ActivityType] = mapped_column(
        Enum(ActivityType, native_enum=False, values_callable=lambda x: [e.value for e in x]),
        nullable=False,
    )
    entity: Mapped[str | None] = mapped_column(String(50), nullable=True)
    entity_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    details: Mapped[str | None] = mapped_column(Text, nullable=True)
    ip_address: Mapped[str | None] = mapped_column(String(45), nullable=True)
    user_agent: Mapped[str | None] = mapped_column(String(255), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False, index=True
    )

    # Relationships
    tenant: Mapped["Tenant | None"] = relationship("Tenant")
    user: Mapped["User | None"] = relationship("User")

    @property
    def tenant_name(self) -> str | None:
        return self.tenant.name if self.tenant else None

    @property
    def user_name(self) -> str | None:
        return self.user.name if self.user else None

    @property
    def user_email(self) -> str | None:
        return self.user.email if self.user else None

    def __repr__(self) -> str:
        return f"<ActivityLog(id='{self.id}', action={self.action.value}, user_id={self.user_id})>"
