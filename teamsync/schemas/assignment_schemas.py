from datetime import datetime

from pydantic import Field

from teamsync.models.assignment import AssignmentStatus
from teamsync.schemas.common import CamelModel


class AssignmentCreate(CamelModel):
    """Schema for assigning an employee to an event"""

    employee_id: str = Field(..., min_length=1)
    event_id: str = Field(..., min_length=1)
    start_date: datetime | None = Field(None, description="Defaults to the event start time")
    end_date: datetime | None = None


class AssignmentUpdate(CamelModel):
    """Schema for updating an assignment (employees may only send status)"""

    status: AssignmentStatus | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None


class AssignmentResponse(CamelModel):
    """Schema for assignment response"""

    id: str
    employee_id: str
    employee_name: str | None = None
    employee_email: str | None = None
    event_id: str
    event_name: str | None = None
    tenant_id: str
    client_id: str
    client_name: str | None = None
    branch_id: str
    branch_name: str | None = None
    start_date: datetime
    end_date: datetime | None = None
    status: AssignmentStatus
    created_at: datetime
    updated_at: datetime
