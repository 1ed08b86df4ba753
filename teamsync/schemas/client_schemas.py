from datetime import datetime

from pydantic import Field

from teamsync.schemas.common import CamelModel


class ClientCreate(CamelModel):
    """
    Schema for creating a client.

    tenant_id is required for super admins and must be omitted or equal
    to the admin's own tenant for tenant admins.
    """

    name: str = Field(..., min_length=1, max_length=255)
    tenant_id: str | None = None
    phone: str | None = Field(None, max_length=20)
    address: str | None = None
    admin_id: str | None = None


class ClientUpdate(CamelModel):
    """Schema for updating a client"""

    name: str | None = Field(None, min_length=1, max_length=255)
    phone: str | None = Field(None, max_length=20)
    address: str | None = None
    admin_id: str | None = None


class ClientResponse(CamelModel):
    """Schema for client response"""

    id: str
    tenant_id: str
    tenant_name: str | None = None
    name: str
    phone: str | None = None
    address: str | None = None
    admin_id: str | None = None
    admin_name: str | None = None
    created_at: datetime
    updated_at: datetime
