"""Decoded application bearer token."""

import uuid
from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class TokenClaims:
    """
    Claims of a validated application access token.

    Built once by the bearer dependency after signature and expiration
    checks pass, then handed to endpoints instead of the raw payload.

    Attributes:
        user_id: Internal user id, parsed from the 'sub' claim
        email: Email captured when the token was issued
        token_id: Unique token identifier ('jti')
        expires_at: Expiration time ('exp'), UTC
    """

    user_id: uuid.UUID
    email: str
    token_id: str | None
    expires_at: datetime

    def __repr__(self) -> str:
        return f"<TokenClaims(user_id={self.user_id}, token_id={self.token_id})>"
