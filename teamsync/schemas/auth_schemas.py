from pydantic import Field

from teamsync.models.role import UserRole
from teamsync.schemas.common import CamelModel


class LoginRequest(CamelModel):
    """Credentials for a cookie session"""

    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=1)


class SessionUserResponse(CamelModel):
    """The resolved actor of the current request"""

    id: str
    role: UserRole
    tenant_id: str | None = None
    client_id: str | None = None
    name: str | None = None
    email: str | None = None
