from datetime import datetime

from pydantic import Field

from teamsync.models.event import EventStatus
from teamsync.schemas.common import CamelModel


class EventCreate(CamelModel):
    """Schema for scheduling an event at a branch"""

    client_id: str = Field(..., min_length=1)
    branch_id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    start_time: datetime
    end_time: datetime


class EventUpdate(CamelModel):
    """Schema for updating an event"""

    name: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    start_time: datetime | None = None
    end_time: datetime | None = None
    status: EventStatus | None = None


class EventResponse(CamelModel):
    """Schema for event response"""

    id: str
    tenant_id: str
    client_id: str
    client_name: str | None = None
    branch_id: str
    branch_name: str | None = None
    branch_address: str | None = None
    name: str
    description: str | None = None
    start_time: datetime
    end_time: datetime
    status: EventStatus
    created_at: datetime
    updated_at: datetime
