from sqlalchemy.orm import Session

from teamsync.core.exceptions import UnauthorizedException
from teamsync.core.logging import get_logger
from teamsync.core.security import create_session_token, verify_password
from teamsync.core.session import build_session_user, home_tenant_id
from teamsync.models.activity_log import ActivityType
from teamsync.models.actor import SessionUser
from teamsync.repositories.user_repository import UserRepository
from teamsync.services.activity_log_service import RequestOrigin, record_activity

logger = get_logger(__name__)


class AuthService:
    """Password login issuing signed session tokens"""

    def __init__(self, db: Session):
        self.db = db
        self.user_repo = UserRepository(db)

    def login(self, email: str, password: str, origin: RequestOrigin | None = None) -> tuple[str, SessionUser]:
        """
        Verify credentials and sign a session token.

        Returns:
            Tuple of (session token, resolved actor)

        Raises:
            UnauthorizedException: Unknown email, wrong password, inactive
                user or user without a role (same message for all)
        """
        user = self.user_repo.get_by_email(email)
        if user is None or not verify_password(password, user.password_hash):
            raise UnauthorizedException("Invalid email or password")

        actor = build_session_user(self.db, user)
        if actor is None:
            raise UnauthorizedException("Invalid email or password")

        record_activity(
            self.db,
            ActivityType.SIGN_IN,
            user_id=user.id,
            tenant_id=home_tenant_id(self.db, user),
            entity="user",
            entity_id=user.id,
            origin=origin,
        )
        self.db.commit()

        logger.info("User logged in", extra={"actor_id": actor.id, "tenant_id": actor.tenant_id})
        return create_session_token(user.id), actor
