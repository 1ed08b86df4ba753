from sqlalchemy.orm import Session

from teamsync.core.authorization import ResourceScope, may_reset_password
from teamsync.core.exceptions import ForbiddenException, InvalidPasswordException, NotFoundException
from teamsync.core.logging import get_logger
from teamsync.core.security import hash_password, verify_password
from teamsync.core.session import home_tenant_id
from teamsync.models.activity_log import ActivityType
from teamsync.models.actor import SessionUser
from teamsync.repositories.user_repository import UserRepository
from teamsync.services.activity_log_service import RequestOrigin, record_activity

logger = get_logger(__name__)


class UserService:
    """Account operations shared by every role"""

    def __init__(self, db: Session):
        self.db = db
        self.user_repo = UserRepository(db)

    def change_password(
        self,
        user_id: str,
        new_password: str,
        actor: SessionUser,
        current_password: str | None = None,
        origin: RequestOrigin | None = None,
    ) -> None:
        """
        Set a user's password.

        Users changing their own password must present the current one.
        Changing someone else's is an admin reset, allowed to super
        admins and to tenant admins for employees and client admins of
        their tenant.

        Raises:
            NotFoundException: No user has this id
            InvalidPasswordException: Own password change with a missing
                or wrong current password
            ForbiddenException: Reset of a user the actor may not reset
        """
        user = self.user_repo.get_by_id(user_id)
        if user is None:
            raise NotFoundException(f"User {user_id} not found")

        tenant_id = home_tenant_id(self.db, user)
        if user.id == actor.id:
            if not current_password or not verify_password(current_password, user.password_hash):
                raise InvalidPasswordException("Current password is incorrect")
        elif not may_reset_password(actor, user.role, ResourceScope(tenant_id=tenant_id)):
            raise ForbiddenException("Cannot change this user's password")

        user.password_hash = hash_password(new_password)
        record_activity(
            self.db,
            ActivityType.PASSWORD_CHANGED,
            user_id=actor.id,
            tenant_id=tenant_id,
            entity="user",
            entity_id=user.id,
            origin=origin,
        )
        self.user_repo.update(user)
        logger.info(f"Password changed for user {user.id}", extra={"actor_id": actor.id})
