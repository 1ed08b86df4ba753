from sqlalchemy import func
from sqlalchemy.orm import Session
from teamsync.models.user import User
from teamsync.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Repository for User model operations"""

    model = User

    def __init__(self, db: Session):
        super().__init__(db)

    def get_by_email(self, email: str) -> User | None:
        """Get user by email (case-insensitive)"""
        return self.db.query(User).filter(func.lower(User.email) == email.lower()).first()

    def email_exists(self, email: str, exclude_id: str | None = None) -> bool:
        """
        Check whether an email is already registered.

        Args:
            email: Email to look up (case-insensitive)
            exclude_id: User id to ignore (the one being updated)

        Returns:
            True if another user owns the email
        """
        query = self.db.query(User.id).filter(func.lower(User.email) == email.lower())
        if exclude_id is not None:
            query = query.filter(User.id != exclude_id)
        return query.first() is not None
