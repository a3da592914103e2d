import uuid
from datetime import datetime

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from app.core.exceptions import ConflictException
from app.models.user import User


class UserRepository:
    """Repository for User model operations"""

    def __init__(self, db: Session):
        self.db = db

    def get_by_google_sub(self, google_sub: str) -> User | None:
        """Get user by Google subject"""
        return self.db.query(User).filter(User.google_sub == google_sub).first()

    def get_by_id(self, user_id: uuid.UUID) -> User | None:
        """Get user by internal ID"""
        return self.db.query(User).filter(User.id == user_id).first()

    def create(self, user: User) -> User:
        """
        Insert a new user.

        Raises:
            ConflictException: If another row already holds the same google_sub
        """
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise ConflictException(f"User with subject {user.google_sub} already exists") from e
        self.db.refresh(user)
        return user

    def touch_last_seen(self, user: User, seen_at: datetime) -> User:
        """Record a sign-in for an existing user"""
        user.last_seen_at = seen_at
        self.db.commit()
        self.db.refresh(user)
        return user
