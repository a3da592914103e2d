import uuid
from datetime import datetime

from sqlalchemy import String, DateTime, Uuid
from sqlalchemy.orm import Mapped, mapped_column
from app.models.base import Base, CreatedAtMixin


class User(Base, CreatedAtMixin):
    """
    A person who has signed in with Google.

    Created on the first successful sign-in for a Google subject and
    touched (last_seen_at) on every later one. Never deleted by the API.
    """

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    google_sub: Mapped[str] = mapped_column(
        String(255), unique=True, nullable=False, index=True
    )
    # google_sub is the 'sub' claim of the Google ID token

    email: Mapped[str] = mapped_column(String(320), nullable=False, index=True)
    display_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    last_seen_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, google_sub={self.google_sub})>"
