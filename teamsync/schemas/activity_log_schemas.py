from datetime import datetime

from teamsync.models.activity_log import ActivityType
from teamsync.schemas.common import CamelModel


class ActivityLogResponse(CamelModel):
    """Schema for one audit trail entry"""

    id: str
    tenant_id: str | None = None
    tenant_name: str | None = None
    user_id: str | None = None
    user_name: str | None = None
    user_email: str | None = None
    action: ActivityType
    entity: str | None = None
    entity_id: str | None = None
    details: str | None = None
    ip_address: str | None = None
    user_agent: str | None = None
    created_at: datetime
