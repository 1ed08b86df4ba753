from datetime import datetime

from pydantic import Field

from teamsync.schemas.common import CamelModel


class InvoiceCreate(CamelModel):
    """Schema for issuing an invoice under a contract"""

    contract_id: str = Field(..., min_length=1)
    amount: float = Field(..., gt=0)
    due_date: datetime
    paid: bool = False


class InvoiceUpdate(CamelModel):
    """Schema for updating an invoice"""

    amount: float | None = Field(None, gt=0)
    due_date: datetime | None = None
    paid: bool | None = None


class InvoiceResponse(CamelModel):
    """Schema for invoice response"""

    id: str
    contract_id: str
    tenant_id: str | None = None
    tenant_name: str | None = None
    client_id: str | None = None
    client_name: str | None = None
    amount: float
    due_date: datetime
    paid: bool
    paid_at: datetime | None = None
    created_at: datetime
    updated_at: datetime
