import os

os.environ["DATABASE_URL"] = "sqlite:///./test.db"
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-unit-tests-only")
os.environ.setdefault("GOOGLE_CLIENT_ID", "test-client-id.apps.googleusercontent.com")
os.environ["DEBUG"] = "false"
os.environ["APPLY_MIGRATIONS"] = "false"

import pytest
from datetime import datetime, timedelta, UTC
from typing import Any
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from jose import jwk, jwt

from app.database import get_db
from app.dependencies import get_identity_verifier
from app.models.base import Base
from app.config import settings
from app.core.google import GoogleIdentityVerifier, JwksProvider
# Import model classes to ensure they're registered with SQLAlchemy
from app.models.user import User
# Import FastAPI app AFTER model imports
from app.main import app

# Test database (SQLite in-memory for speed)
# Use StaticPool to ensure all connections share the same in-memory database
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"
engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

GOOGLE_ISSUER = "https://accounts.google.com"
GOOGLE_KID = "test-google-kid"


def _generate_rsa_key() -> tuple[str, str]:
    key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    private_pem = key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode()
    public_pem = key.public_key().public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    ).decode()
    return private_pem, public_pem


# Google's signing key, and an unrelated key used to forge signatures
GOOGLE_PRIVATE_KEY, GOOGLE_PUBLIC_KEY = _generate_rsa_key()
FORGER_PRIVATE_KEY, _ = _generate_rsa_key()


def public_jwk(public_pem: str, kid: str) -> dict[str, Any]:
    """JWK for a PEM public key, as Google publishes it"""
    key = jwk.construct(public_pem, algorithm="RS256").to_dict()
    key["kid"] = kid
    key["use"] = "sig"
    return key


class StaticJwksProvider(JwksProvider):
    """JWKS provider serving fixed key sets; records every call"""

    def __init__(self, jwks: dict[str, Any], refreshed: dict[str, Any] | None = None):
        self.jwks = jwks
        self.refreshed = refreshed if refreshed is not None else jwks
        self.calls: list[bool] = []

    def get_jwks(self, force_refresh: bool = False) -> dict[str, Any]:
        self.calls.append(force_refresh)
        return self.refreshed if force_refresh else self.jwks


def create_google_token(
    sub: str = "google-sub-123",
    email: str | None = "ada@example.com",
    name: str | None = "Ada Lovelace",
    audience: str | None = None,
    issuer: str = GOOGLE_ISSUER,
    expired: bool = False,
    private_key: str = GOOGLE_PRIVATE_KEY,
    kid: str = GOOGLE_KID,
) -> str:
    """
    Generate a Google-style RS256 ID token for testing.

    Args:
        sub: Google subject
        email: 'email' claim, omitted when None
        name: 'name' claim, omitted when None
        audience: 'aud' claim, defaults to GOOGLE_CLIENT_ID
        expired: If True, create expired token
        private_key: Signing key; pass FORGER_PRIVATE_KEY for a bad signature

    Returns:
        Encoded JWT
    """
    now = datetime.now(UTC)
    exp = now - timedelta(minutes=5) if expired else now + timedelta(hours=1)
    payload: dict[str, Any] = {
        "iss": issuer,
        "aud": audience or settings.GOOGLE_CLIENT_ID,
        "sub": sub,
        "iat": now - timedelta(hours=2) if expired else now,
        "exp": exp,
    }
    if email is not None:
        payload["email"] = email
        payload["email_verified"] = True
    if name is not None:
        payload["name"] = name

    return jwt.encode(payload, private_key, algorithm="RS256", headers={"kid": kid})


def create_test_token(
    user_id: str = "00000000-0000-0000-0000-000000000000",
    email: str = "ada@example.com",
    expired: bool = False,
) -> str:
    """
    Generate an application JWT for testing.

    Args:
        user_id: Value embedded in 'sub' claim
        expired: If True, create expired token

    Returns:
        Encoded JWT token
    """
    if expired:
        exp = datetime.now(UTC) - timedelta(minutes=5)
    else:
        exp = datetime.now(UTC) + timedelta(minutes=15)

    payload = {"sub": user_id, "email": email, "exp": exp, "iat": datetime.now(UTC)}

    token = jwt.encode(payload, settings.SECRET_KEY, algorithm="HS256")
    return token


@pytest.fixture
def jwks_provider():
    """Static JWKS holding the test Google public key"""
    return StaticJwksProvider({"keys": [public_jwk(GOOGLE_PUBLIC_KEY, GOOGLE_KID)]})


@pytest.fixture
def verifier(jwks_provider):
    """Google verifier backed by the static test keys"""
    return GoogleIdentityVerifier(jwks_provider, issuers=settings.google_issuers_list)


@pytest.fixture(scope="function")
def db_session():
    """Create fresh database for each test"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db_session, verifier):
    """FastAPI test client with test database and test Google keys"""

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_identity_verifier] = lambda: verifier
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def create_user(db_session):
    """Insert a user row directly"""

    def _create_user(
        google_sub: str = "google-sub-123",
        email: str = "ada@example.com",
        display_name: str | None = "Ada Lovelace",
    ) -> User:
        user = User(google_sub=google_sub, email=email, display_name=display_name)
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _create_user


@pytest.fixture
def sign_in(client):
    """POST a Google ID token to the sign-in endpoint"""

    def _sign_in(id_token: str):
        return client.post("/api/auth/google", json={"idToken": id_token})

    return _sign_in
