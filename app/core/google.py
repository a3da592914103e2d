"""Google ID token verification.

Google signs ID tokens with rotating RSA keys published as a JWKS document.
Keys are fetched by a JwksProvider, which owns the cache; the verifier only
selects a key by 'kid' and validates the token with python-jose.
"""

import logging
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

import httpx
from cachetools import TTLCache
from jose import JWTError, jwt

from app.core.exceptions import VerificationError

logger = logging.getLogger(__name__)

GOOGLE_ALGORITHMS = ["RS256"]


@dataclass(frozen=True)
class GoogleIdentity:
    """Identity asserted by a verified Google ID token"""

    subject: str
    email: str | None
    display_name: str | None


class JwksProvider(ABC):
    @abstractmethod
    def get_jwks(self, force_refresh: bool = False) -> dict[str, Any]:
        """
        Return the issuer's current JSON Web Key Set.

        Args:
            force_refresh: Bypass any cached copy (used after an unknown 'kid')

        Returns:
            JWKS dictionary with a "keys" list
        """
        raise NotImplementedError


class HttpJwksProvider(JwksProvider):
    """Fetches a JWKS document over HTTP and caches it for `ttl` seconds."""

    def __init__(
        self,
        jwks_url: str,
        ttl: int = 3600,
        timeout: float = 5.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._jwks_url = jwks_url
        self._timeout = timeout
        self._transport = transport
        self._cache: TTLCache[str, dict[str, Any]] = TTLCache(maxsize=1, ttl=ttl)
        # TTLCache is not thread-safe; also serializes refetches on expiry
        self._lock = threading.Lock()

    def get_jwks(self, force_refresh: bool = False) -> dict[str, Any]:
        with self._lock:
            if not force_refresh:
                cached = self._cache.get(self._jwks_url)
                if cached:
                    return cached

            jwks = self._fetch()
            self._cache[self._jwks_url] = jwks
        logger.debug("Fetched %d signing keys from %s", len(jwks.get("keys", [])), self._jwks_url)
        return jwks

    def _fetch(self) -> dict[str, Any]:
        try:
            with httpx.Client(timeout=self._timeout, transport=self._transport) as client:
                resp = client.get(self._jwks_url)
                resp.raise_for_status()
                return resp.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise VerificationError(f"Failed to fetch JWKS: {exc}") from exc


class GoogleIdentityVerifier:
    """Validates Google ID tokens against Google's published signing keys."""

    def __init__(self, jwks_provider: JwksProvider, issuers: list[str]) -> None:
        self._jwks_provider = jwks_provider
        self._issuers = issuers

    def _find_key(self, kid: str) -> dict[str, Any] | None:
        for force_refresh in (False, True):
            if force_refresh:
                logger.info("No Google signing key with kid=%s, refreshing key set", kid)
            jwks = self._jwks_provider.get_jwks(force_refresh=force_refresh)
            for key in jwks.get("keys", []):
                if key.get("kid") == kid:
                    return key
        return None

    def verify(self, assertion: str, expected_audience: str) -> GoogleIdentity:
        """
        Verify a Google ID token and extract the asserted identity.

        Args:
            assertion: Raw ID token (JWT) from Google Sign-In
            expected_audience: OAuth client id the token must be issued for

        Returns:
            GoogleIdentity with subject, email and display name

        Raises:
            VerificationError: If signature, expiry, audience or issuer is invalid
        """
        try:
            header = jwt.get_unverified_header(assertion)
        except JWTError as e:
            raise VerificationError(f"Malformed token header: {e}") from e

        if header.get("alg") not in GOOGLE_ALGORITHMS:
            raise VerificationError(f"Disallowed algorithm: {header.get('alg')}")

        kid = header.get("kid")
        if not kid:
            raise VerificationError("Token header has no kid")

        key = self._find_key(kid)
        if key is None:
            raise VerificationError(f"No signing key matches kid={kid}")

        try:
            claims = jwt.decode(
                assertion,
                key,
                algorithms=GOOGLE_ALGORITHMS,
                audience=expected_audience,
                issuer=self._issuers,
                options={"verify_at_hash": False},
            )
        except JWTError as e:
            raise VerificationError(str(e)) from e

        subject = claims.get("sub")
        if not subject:
            raise VerificationError("Token missing subject")

        return GoogleIdentity(
            subject=subject,
            email=claims.get("email"),
            display_name=claims.get("name"),
        )
