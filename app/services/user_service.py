import uuid

from sqlalchemy.orm import Session
from app.core.exceptions import NotFoundException
from app.models.user import User
from app.repositories.user_repository import UserRepository


class UserService:
    """Service for user profile lookups"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = UserRepository(db)

    def get_profile(self, user_id: uuid.UUID) -> User:
        """
        Get the profile of the authenticated user.

        Raises:
            NotFoundException: If the user row no longer exists
        """
        user = self.repo.get_by_id(user_id)
        if not user:
            raise NotFoundException("User not found")
        return user
