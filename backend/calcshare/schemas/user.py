"""User Schemas — public profile returned by the auth endpoints."""

from datetime import datetime

from pydantic import BaseModel, Field


class UserProfileResponse(BaseModel):
    id: str
    email: str | None = None
    name: str | None = None
    picture: str | None = None
    created_at: datetime = Field(serialization_alias="createdAt")
    last_login: datetime = Field(serialization_alias="lastLogin")
