from datetime import datetime

from pydantic import Field

from teamsync.models.plan import BillingCycle
from teamsync.schemas.common import CamelModel


class PlanCreate(CamelModel):
    """Schema for adding a plan to the catalogue"""

    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    price: float = Field(default=0.0, ge=0)
    billing_cycle: BillingCycle = BillingCycle.MONTHLY
    stripe_price_id: str | None = Field(None, max_length=255)
    is_active: bool = True


class PlanUpdate(CamelModel):
    """Schema for updating a plan"""

    name: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    price: float | None = Field(None, ge=0)
    billing_cycle: BillingCycle | None = None
    stripe_price_id: str | None = Field(None, max_length=255)
    is_active: bool | None = None


class PlanResponse(CamelModel):
    """Schema for plan response"""

    id: str
    name: str
    description: str | None = None
    price: float
    billing_cycle: BillingCycle
    stripe_price_id: str | None = None
    is_active: bool
    created_at: datetime
    updated_at: datetime
