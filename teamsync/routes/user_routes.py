from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from teamsync.database import get_db
from teamsync.dependencies import get_current_actor, get_request_origin
from teamsync.models.actor import SessionUser
from teamsync.schemas.common import DataResponse, MessageResponse
from teamsync.schemas.user_schemas import PasswordChange
from teamsync.services.activity_log_service import RequestOrigin
from teamsync.services.user_service import UserService

router = APIRouter()


@router.post("/{user_id}/password", response_model=DataResponse[MessageResponse])
def change_password(
    user_id: str,
    data: PasswordChange,
    actor: SessionUser = Depends(get_current_actor),
    origin: RequestOrigin = Depends(get_request_origin),
    db: Session = Depends(get_db),
):
    """
    Change a password.

    Own password: currentPassword is required. Another user's password:
    admin reset, no current password needed.
    """
    service = UserService(db)
    service.change_password(
        user_id,
        data.new_password,
        actor,
        current_password=data.current_password,
        origin=origin,
    )
    return {"data": {"message": "Password updated"}}
