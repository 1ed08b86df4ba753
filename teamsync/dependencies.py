from dataclasses import dataclass

from fastapi import Depends, Query, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from teamsync.config import settings
from teamsync.core.exceptions import UnauthorizedException
from teamsync.core.session import resolve_actor
from teamsync.database import get_db
from teamsync.integrations.email import EmailService
from teamsync.integrations.payments import StripeGateway
from teamsync.models.actor import SessionUser
from teamsync.services.activity_log_service import RequestOrigin

security = HTTPBearer(auto_error=False)

MAX_PAGE_SIZE = 100


async def get_current_actor(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    db: Session = Depends(get_db),
) -> SessionUser:
    """
    FastAPI dependency resolving the actor of the request.

    Flow:
    1. Read the Authorization bearer value and the session cookie
    2. Resolve them to a user and its scope ids (teamsync.core.session)
    3. Return the SessionUser, passed explicitly into every service call

    Raises:
        UnauthorizedException: If no actor can be resolved
    """
    bearer = credentials.credentials if credentials else None
    cookie = request.cookies.get(settings.SESSION_COOKIE_NAME)

    actor = resolve_actor(db, bearer, cookie)
    if actor is None:
        raise UnauthorizedException("Not authenticated")
    return actor


def get_payment_gateway() -> StripeGateway:
    return StripeGateway()


def get_email_service() -> EmailService:
    return EmailService()


def get_request_origin(request: Request) -> RequestOrigin:
    return RequestOrigin(
        ip_address=request.client.host if request.client else None,
        user_agent=request.headers.get("user-agent"),
    )


@dataclass(frozen=True)
class Pagination:
    page: int
    limit: int


def get_pagination(
    page: int = Query(1, ge=1, description="1-based page number"),
    limit: int = Query(10, ge=1, description="Page size, capped at 100"),
) -> Pagination:
    return Pagination(page=page, limit=min(limit, MAX_PAGE_SIZE))
