from pydantic import BaseModel, Field


class GoogleTokenRequest(BaseModel):
    """Schema for exchanging a Google ID token"""

    id_token: str | None = Field(None, alias="idToken")
    # Optional here so a missing token is a 400 from the service, not a 422

    class Config:
        populate_by_name = True


class AuthResponse(BaseModel):
    """Schema for a successful sign-in"""

    token: str
