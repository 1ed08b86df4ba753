"""
Session resolver: turns request credentials into a SessionUser.

Credentials come from the Authorization bearer header or the signed
session cookie. Any authentication failure yields None; only storage
errors propagate.
"""

from sqlalchemy.orm import Session

from teamsync.config import settings
from teamsync.core.exceptions import UnauthorizedException
from teamsync.core.logging import get_logger
from teamsync.core.security import extract_user_id
from teamsync.models.actor import SessionUser
from teamsync.models.role import UserRole
from teamsync.models.user import User
from teamsync.repositories.client_repository import ClientRepository
from teamsync.repositories.tenant_membership_repository import TenantMembershipRepository
from teamsync.repositories.tenant_repository import TenantRepository
from teamsync.repositories.user_repository import UserRepository

logger = get_logger(__name__)


def _verified_subject(token: str) -> str | None:
    try:
        return extract_user_id(token)
    except UnauthorizedException as e:
        logger.debug(f"Rejected session token: {e.message}")
        return None


def actor_id_from_credentials(bearer_token: str | None, session_cookie: str | None) -> str | None:
    """
    Extract the actor id carried by the request.

    A bearer value wins over the cookie. With TRUST_BEARER_ACTOR_ID the
    bearer value is the actor id itself (set by a trusted proxy);
    otherwise it must be a signed session token like the cookie.
    """
    if bearer_token:
        if settings.TRUST_BEARER_ACTOR_ID:
            return bearer_token
        return _verified_subject(bearer_token)
    if session_cookie:
        return _verified_subject(session_cookie)
    return None


def build_session_user(db: Session, user: User) -> SessionUser | None:
    """
    Derive the scope ids of a user from storage.

    Tenant and client admins are scoped to the tenant or client whose
    admin_id points at them. Employees are scoped to the tenant of their
    membership.
    """
    if user.role is None or not user.is_active:
        return None

    tenant_id = None
    client_id = None

    if user.role == UserRole.TENANT_ADMIN:
        tenant = TenantRepository(db).get_by_admin_id(user.id)
        tenant_id = tenant.id if tenant else None
    elif user.role == UserRole.CLIENT_ADMIN:
        client = ClientRepository(db).get_by_admin_id(user.id)
        client_id = client.id if client else None
    elif user.role == UserRole.EMPLOYEE:
        membership = TenantMembershipRepository(db).get_user_membership(user.id)
        tenant_id = membership.tenant_id if membership else None

    return SessionUser(
        id=user.id,
        role=user.role,
        tenant_id=tenant_id,
        client_id=client_id,
        name=user.name,
        email=user.email,
    )


def home_tenant_id(db: Session, user: User) -> str | None:
    """Tenant a user belongs to, a client admin's being its client's tenant"""
    if user.role == UserRole.TENANT_ADMIN:
        tenant = TenantRepository(db).get_by_admin_id(user.id)
        return tenant.id if tenant else None
    if user.role == UserRole.CLIENT_ADMIN:
        client = ClientRepository(db).get_by_admin_id(user.id)
        return client.tenant_id if client else None
    return user.tenant_id


def resolve_actor(
    db: Session,
    bearer_token: str | None,
    session_cookie: str | None,
) -> SessionUser | None:
    """
    Resolve the actor of a request.

    Args:
        db: Database session
        bearer_token: Value of the Authorization bearer header, if any
        session_cookie: Value of the session cookie, if any

    Returns:
        SessionUser, or None when the request is not authenticated, the
        user does not exist, is inactive, or has no recognised role
    """
    actor_id = actor_id_from_credentials(bearer_token, session_cookie)
    if not actor_id:
        return None

    user = UserRepository(db).get_by_id(actor_id)
    if user is None:
        return None

    return build_session_user(db, user)
