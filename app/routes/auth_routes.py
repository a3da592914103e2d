from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.google import GoogleIdentityVerifier
from app.database import get_db
from app.dependencies import get_identity_verifier
from app.services.auth_service import AuthService
from app.schemas.auth_schemas import GoogleTokenRequest, AuthResponse

router = APIRouter()


@router.post("/google", response_model=AuthResponse)
def google_sign_in(
    data: GoogleTokenRequest | None = None,
    verifier: GoogleIdentityVerifier = Depends(get_identity_verifier),
    db: Session = Depends(get_db),
):
    """Exchange a Google ID token for an application access token"""
    service = AuthService(db, verifier)
    token = service.sign_in(data.id_token if data else None)
    return AuthResponse(token=token)
