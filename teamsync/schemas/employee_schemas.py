from datetime import datetime

from pydantic import Field

from teamsync.schemas.common import CamelModel


class EmployeeCreate(CamelModel):
    """Schema for onboarding an employee into a tenant"""

    name: str = Field(..., min_length=1, max_length=255)
    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=8, max_length=128)
    phone: str | None = Field(None, max_length=20)
    tenant_id: str | None = None
    branch_id: str | None = None


class EmployeeUpdate(CamelModel):
    """
    Schema for updating an employee.

    Employees editing their own profile may not send email, branch_id
    or is_active.
    """

    name: str | None = Field(None, min_length=1, max_length=255)
    email: str | None = Field(None, min_length=3, max_length=255)
    phone: str | None = Field(None, max_length=20)
    branch_id: str | None = None
    is_active: bool | None = None


class EmployeeResponse(CamelModel):
    """Schema for employee response"""

    id: str
    name: str | None = None
    email: str
    phone: str | None = None
    is_active: bool
    tenant_id: str | None = None
    tenant_name: str | None = None
    branch_id: str | None = None
    branch_name: str | None = None
    created_at: datetime
    updated_at: datetime
