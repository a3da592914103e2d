import uuid

from pydantic import BaseModel, Field


class MeResponse(BaseModel):
    """Public profile of the authenticated user"""

    id: uuid.UUID
    email: str
    display_name: str | None = Field(None, alias="displayName")

    class Config:
        from_attributes = True
        populate_by_name = True
