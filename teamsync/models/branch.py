from sqlalchemy import String, Text, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import TYPE_CHECKING

from teamsync.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from teamsync.models.client import Client
    from teamsync.models.user import User


class Branch(Base, TimestampMixin):
    """
    Physical site of a client.

    A branch stores only its client_id; its tenant is always derived
    through the client, so moving a client never leaves a stale tenant
    key behind.
    """

    __tablename__ = "branches"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    client_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("clients.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    address: Mapped[str | None] = mapped_column(Text, nullable=True)
    supervisor_id: Mapped[str | None] = mapped_column(
        String(64), ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )

    # Relationships
    client: Mapped["Client"] = relationship("Client", back_populates="branches")
    supervisor: Mapped["User | None"] = relationship("User")

    __table_args__ = (
        UniqueConstraint("client_id", "name", name="uq_branch_client_name"),
    )

    @property
    def tenant_id(self) -> str | None:
        return self.client.tenant_id if self.client else None

    @property
    def tenant_name(self) -> str | None:
        return self.client.tenant_name if self.client else None

    @property
    def client_name(self) -> str | None:
        return self.client.name if self.client else None

    @property
    def supervisor_name(self) -> str | None:
        return self.supervisor.name if self.supervisor else None

    def __repr__(self) -> str:
        return f"<Branch(id='{self.id}', client_id='{self.client_id}')>"
