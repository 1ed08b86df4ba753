from datetime import datetime

from pydantic import Field

from teamsync.schemas.common import CamelModel


class BranchCreate(CamelModel):
    """Schema for creating a branch under a client"""

    client_id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1, max_length=255)
    address: str | None = None
    supervisor_id: str | None = None


class BranchUpdate(CamelModel):
    """Schema for updating a branch"""

    name: str | None = Field(None, min_length=1, max_length=255)
    address: str | None = None
    supervisor_id: str | None = None


class BranchResponse(CamelModel):
    """Schema for branch response"""

    id: str
    client_id: str
    client_name: str | None = None
    tenant_id: str | None = None
    tenant_name: str | None = None
    name: str
    address: str | None = None
    supervisor_id: str | None = None
    supervisor_name: str | None = None
    created_at: datetime
    updated_at: datetime
