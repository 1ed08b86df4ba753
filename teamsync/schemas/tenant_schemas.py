from datetime import datetime

from pydantic import Field

from teamsync.schemas.common import CamelModel
from teamsync.schemas.plan_schemas import PlanResponse


class TenantCreate(CamelModel):
    """Create a tenant (super admin only)"""

    name: str = Field(..., min_length=1, max_length=255)
    email: str | None = Field(None, max_length=255)
    phone: str | None = Field(None, max_length=20)
    address: str | None = None
    admin_id: str | None = None
    plan_id: str | None = None


class TenantUpdate(CamelModel):
    """Partial tenant update; only provided fields are applied"""

    name: str | None = Field(None, min_length=1, max_length=255)
    email: str | None = Field(None, max_length=255)
    phone: str | None = Field(None, max_length=20)
    address: str | None = None
    admin_id: str | None = None


class TenantResponse(CamelModel):
    """Tenant details response"""

    id: str
    name: str
    email: str | None = None
    phone: str | None = None
    address: str | None = None
    admin_id: str | None = None
    admin_name: str | None = None
    plan_id: str | None = None
    plan_name: str | None = None
    subscription_status: str | None = None
    created_at: datetime
    updated_at: datetime


class TenantPlanUpdate(CamelModel):
    """Switch the tenant to another plan"""

    plan_id: str = Field(..., min_length=1)


class TenantPlanResponse(CamelModel):
    """Current plan of a tenant with its subscription state"""

    tenant_id: str
    plan: PlanResponse | None = None
    subscription_status: str | None = None
