from decimal import Decimal
from enum import Enum as PyEnum
from sqlalchemy import String, Text, Numeric, Boolean, Enum
from sqlalchemy.orm import Mapped, mapped_column

from teamsync.models.base import Base, TimestampMixin


class BillingCycle(str, PyEnum):
    """Plan billing cycle enumeration"""

    MONTHLY = "monthly"
    YEARLY = "yearly"


class Plan(Base, TimestampMixin):
    """
    Subscription plan from the global catalogue.

    A plan without stripe_price_id is free: switching to it creates no
    subscription at the payment provider.
    """

    __tablename__ = "plans"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    price: Mapped[Decimal] = mapped_column(Numeric(precision=10, scale=2), nullable=False, default=0)
    billing_cycle: Mapped[BillingCycle] = mapped_column(
        Enum(BillingCycle, native_enum=False, values_callable=lambda x: [e.value for e in x]),
        nullable=False,
        default=BillingCycle.MONTHLY,
    )
    stripe_price_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
