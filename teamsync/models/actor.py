"""Resolved actor for request authorization."""

from dataclasses import dataclass
from teamsync.models.role import UserRole


@dataclass(frozen=True)
class SessionUser:
    """
    The authenticated actor of one request.

    Produced once by the session resolver and passed explicitly into
    every service call. Which of tenant_id/client_id is meaningful is
    decided by the role alone:

    - SUPER_ADMIN: neither, global scope
    - TENANT_ADMIN: tenant_id (the tenant it administers)
    - CLIENT_ADMIN: client_id (the client it administers)
    - EMPLOYEE: tenant_id of its membership; scoped to its own id

    Attributes:
        id: User id
        role: Platform role
        tenant_id: Tenant scope, when the role has one
        client_id: Client scope, when the role has one
        name: Display name
        email: Login email
    """

    id: str
    role: UserRole
    tenant_id: str | None = None
    client_id: str | None = None
    name: str | None = None
    email: str | None = None

    @property
    def is_super_admin(self) -> bool:
        return self.role == UserRole.SUPER_ADMIN

    @property
    def is_tenant_admin(self) -> bool:
        return self.role == UserRole.TENANT_ADMIN

    @property
    def is_client_admin(self) -> bool:
        return self.role == UserRole.CLIENT_ADMIN

    @property
    def is_employee(self) -> bool:
        return self.role == UserRole.EMPLOYEE

    def __repr__(self) -> str:
        return f"<SessionUser(id='{self.id}', role={self.role.value}, tenant_id={self.tenant_id}, client_id={self.client_id})>"
