import uuid
from datetime import datetime, timedelta, UTC

from jose import JWTError, jwt
from app.config import settings
from app.core.exceptions import UnauthorizedException
from app.models.token_claims import TokenClaims


def create_access_token(user_id: uuid.UUID, email: str | None) -> str:
    """
    Issue a signed application JWT for a user.

    Args:
        user_id: Internal user id, stored in the 'sub' claim
        email: User email, stored in the 'email' claim

    Returns:
        Encoded JWT valid for ACCESS_TOKEN_EXPIRE_MINUTES
    """
    if user_id is None:
        raise ValueError("user_id is required")

    now = datetime.now(UTC)
    payload = {
        "sub": str(user_id),
        "email": email or "",
        "jti": uuid.uuid4().hex,
        "iat": now,
        "exp": now + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
    }
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_jwt(token: str) -> TokenClaims:
    """
    Decode and validate an application JWT.

    Args:
        token: JWT access token from Authorization header

    Returns:
        TokenClaims with the user id parsed from 'sub'

    Raises:
        UnauthorizedException: If token invalid, expired, or malformed
    """
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except JWTError as e:
        raise UnauthorizedException(f"Invalid token: {str(e)}")

    # jose checks expiration when present, but does not require it
    exp = payload.get("exp")
    if exp is None:
        raise UnauthorizedException("Token missing expiration")

    sub = payload.get("sub")
    if not sub:
        raise UnauthorizedException("Token missing user identifier")

    try:
        user_id = uuid.UUID(str(sub))
    except ValueError:
        raise UnauthorizedException("Token user identifier is malformed")

    return TokenClaims(
        user_id=user_id,
        email=payload.get("email", ""),
        token_id=payload.get("jti"),
        expires_at=datetime.fromtimestamp(int(exp), UTC),
    )
