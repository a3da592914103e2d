from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import get_token_claims
from app.models.token_claims import TokenClaims
from app.services.user_service import UserService
from app.schemas.user_schemas import MeResponse

router = APIRouter()


@router.get("/me", response_model=MeResponse)
def get_me(claims: TokenClaims = Depends(get_token_claims), db: Session = Depends(get_db)):
    """Get the authenticated user's profile"""
    service = UserService(db)
    user = service.get_profile(claims.user_id)
    return MeResponse.model_validate(user)
