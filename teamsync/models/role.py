"""User role enum for role-based access control."""

from enum import Enum as PyEnum


class UserRole(str, PyEnum):
    """
    Platform roles, each with its own scope.

    Scopes (widest to narrowest):
    1. SUPER_ADMIN - Global, every tenant
    2. TENANT_ADMIN - The tenant whose admin_id points at the user
    3. CLIENT_ADMIN - The client whose admin_id points at the user
    4. EMPLOYEE - Resources referencing the user's own id

    The capability matrix itself lives in teamsync.core.authorization.
    """

    SUPER_ADMIN = "super_admin"
    TENANT_ADMIN = "tenant_admin"
    CLIENT_ADMIN = "client_admin"
    EMPLOYEE = "employee"
