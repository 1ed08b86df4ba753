from datetime import datetime

from pydantic import Field

from teamsync.models.contract import ContractStatus
from teamsync.schemas.common import CamelModel


class ContractCreate(CamelModel):
    """Schema for creating a contract with a client"""

    client_id: str = Field(..., min_length=1)
    start_date: datetime
    end_date: datetime | None = None
    terms: str | None = None
    status: ContractStatus = ContractStatus.ACTIVE


class ContractUpdate(CamelModel):
    """Schema for updating a contract"""

    start_date: datetime | None = None
    end_date: datetime | None = None
    terms: str | None = None
    status: ContractStatus | None = None


class ContractResponse(CamelModel):
    """Schema for contract response"""

    id: str
    tenant_id: str
    tenant_name: str | None = None
    client_id: str
    client_name: str | None = None
    start_date: datetime
    end_date: datetime | None = None
    terms: str | None = None
    status: ContractStatus
    created_at: datetime
    updated_at: datetime
