import logging

from sqlalchemy.orm import Session
from app.config import settings
from app.core.exceptions import (
    ConflictException,
    UnauthorizedException,
    ValidationException,
    VerificationError,
)
from app.core.google import GoogleIdentity, GoogleIdentityVerifier
from app.core.security import create_access_token
from app.models.base import utcnow
from app.models.user import User
from app.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)


class AuthService:
    """Exchanges Google ID tokens for application access tokens"""

    def __init__(self, db: Session, verifier: GoogleIdentityVerifier):
        self.db = db
        self.verifier = verifier
        self.repo = UserRepository(db)

    def sign_in(self, id_token: str | None) -> str:
        """
        Sign a user in with a Google ID token.

        Flow:
        1. Reject an empty token before touching anything
        2. Verify the token against Google's keys and our client id
        3. Create the user on first sign-in, otherwise record last_seen_at
        4. Issue an application JWT for the user

        Raises:
            ValidationException: If id_token is missing or empty
            UnauthorizedException: If Google token verification fails
        """
        if not id_token or not id_token.strip():
            raise ValidationException("idToken is required")

        try:
            identity = self.verifier.verify(id_token, settings.GOOGLE_CLIENT_ID)
        except VerificationError as e:
            logger.info("Rejected Google ID token: %s", e)
            raise UnauthorizedException("Invalid Google ID token")

        try:
            user = self._upsert_user(identity)
        except ConflictException:
            # Lost a first-sign-in race; the row exists now
            logger.info("Concurrent first sign-in for subject %s, retrying lookup", identity.subject)
            user = self._upsert_user(identity)

        return create_access_token(user.id, user.email)

    def _upsert_user(self, identity: GoogleIdentity) -> User:
        user = self.repo.get_by_google_sub(identity.subject)

        if user is None:
            user = self.repo.create(
                User(
                    google_sub=identity.subject,
                    email=identity.email or "",
                    display_name=identity.display_name,
                )
            )
            logger.info("Created user %s for Google subject %s", user.id, identity.subject)
            return user

        # email/display_name are intentionally left as first recorded
        user = self.repo.touch_last_seen(user, utcnow())
        logger.debug("User %s signed in again", user.id)
        return user
