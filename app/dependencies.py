from functools import lru_cache

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from app.config import settings
from app.core.exceptions import UnauthorizedException
from app.core.google import GoogleIdentityVerifier, HttpJwksProvider
from app.core.security import decode_jwt
from app.models.token_claims import TokenClaims

# auto_error=False so a missing header goes through our 401 handler
security = HTTPBearer(auto_error=False)


@lru_cache
def get_identity_verifier() -> GoogleIdentityVerifier:
    """
    FastAPI dependency providing the process-wide Google token verifier.

    The JWKS cache lives in the provider built here, once per process.
    Tests override this dependency with a verifier backed by static keys.
    """
    provider = HttpJwksProvider(
        settings.GOOGLE_JWKS_URL,
        ttl=settings.GOOGLE_JWKS_CACHE_TTL,
        timeout=settings.GOOGLE_JWKS_TIMEOUT,
    )
    return GoogleIdentityVerifier(provider, issuers=settings.google_issuers_list)


async def get_token_claims(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> TokenClaims:
    """
    FastAPI dependency to validate the application JWT.

    Flow:
    1. Extract token from Authorization: Bearer <token>
    2. Validate signature and expiration using SECRET_KEY
    3. Parse the internal user id from the 'sub' claim

    Raises:
        UnauthorizedException: If header missing, token invalid or expired,
            or 'sub' is absent or not a user id
    """
    if credentials is None or not credentials.credentials:
        raise UnauthorizedException("Not authenticated")

    return decode_jwt(credentials.credentials)
