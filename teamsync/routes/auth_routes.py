from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from teamsync.config import settings
from teamsync.database import get_db
from teamsync.dependencies import get_current_actor, get_request_origin
from teamsync.models.actor import SessionUser
from teamsync.schemas.auth_schemas import LoginRequest, SessionUserResponse
from teamsync.schemas.common import DataResponse, MessageResponse
from teamsync.services.activity_log_service import RequestOrigin
from teamsync.services.auth_service import AuthService

router = APIRouter()


@router.post("/login", response_model=DataResponse[SessionUserResponse])
def login(
    credentials: LoginRequest,
    response: Response,
    origin: RequestOrigin = Depends(get_request_origin),
    db: Session = Depends(get_db),
):
    """
    Sign in with email and password.

    Sets an HTTP-only signed session cookie valid for SESSION_TTL_HOURS.
    """
    service = AuthService(db)
    token, actor = service.login(credentials.email, credentials.password, origin)
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=token,
        max_age=settings.SESSION_TTL_HOURS * 3600,
        httponly=True,
        secure=settings.SESSION_COOKIE_SECURE,
        samesite="lax",
    )
    return {"data": actor}


@router.post("/logout", response_model=DataResponse[MessageResponse])
def logout(response: Response):
    """Clear the session cookie"""
    response.delete_cookie(settings.SESSION_COOKIE_NAME)
    return {"data": {"message": "Logged out"}}


@router.get("/me", response_model=DataResponse[SessionUserResponse])
def me(actor: SessionUser = Depends(get_current_actor)):
    """Return the actor resolved from the request credentials"""
    return {"data": actor}
