from sqlalchemy import String, Boolean, Enum
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import TYPE_CHECKING

from teamsync.models.base import Base, TimestampMixin
from teamsync.models.role import UserRole

if TYPE_CHECKING:
    from teamsync.models.tenant_membership import TenantMembership


class User(Base, TimestampMixin):
    """
    Every person who can sign in: admins of all levels and employees.

    The role decides which scope ids the session resolver looks up.
    Employees additionally own a TenantMembership row.
    """

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    phone: Mapped[str | None] = mapped_column(String(20), nullable=True)
    password_hash: Mapped[str | None] = mapped_column(String(255), nullable=True)
    role: Mapped[UserRole | None] = mapped_column(
        Enum(UserRole, native_enum=False, values_callable=lambda x: [e.value for e in x]),
        nullable=True,
    )
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    # Relationships
    membership: Mapped["TenantMembership | None"] = relationship(
        "TenantMembership",
        back_populates="user",
        uselist=False,
        cascade="all, delete-orphan",
    )

    @property
    def tenant_id(self) -> str | None:
        return self.membership.tenant_id if self.membership else None

    @property
    def tenant_name(self) -> str | None:
        if self.membership is None or self.membership.tenant is None:
            return None
        return self.membership.tenant.name

    @property
    def branch_id(self) -> str | None:
        return self.membership.branch_id if self.membership else None

    @property
    def branch_name(self) -> str | None:
        if self.membership is None or self.membership.branch is None:
            return None
        return self.membership.branch.name

    def __repr__(self) -> str:
        return f"<User(id='{self.id}', role={self.role})>"
