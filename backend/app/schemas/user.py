"""User-related schemas."""

from uuid import UUID
from pydantic import BaseModel, EmailStr, Field

from backend.app.schemas.common import IsoDatetime


class UserRecord(BaseModel):
    """Schema for user data in responses."""

    id: UUID = Field(..., description="User ID")
    email: EmailStr = Field(..., description="Login email")
    name: str | None = Field(..., description="Display name")
    created_at: IsoDatetime = Field(..., description="Registration timestamp")
    updated_at: IsoDatetime = Field(..., description="Last profile change")

    model_config = {"from_attributes": True}


class UserCreate(BaseModel):
    """Schema for user sign-up."""

    email: EmailStr = Field(..., description="Login email")
    password: str = Field(
        ...,
        min_length=8,
        description="Password (8 characters or more)"
    )
    name: str | None = Field(default=None, description="Display name")


class UserUpdate(BaseModel):
    """Schema for updating a user profile."""

    name: str | None = None
    email: EmailStr | None = None


class SignInRequest(BaseModel):
    """Schema for sign-in."""

    email: EmailStr
    password: str = Field(..., min_length=1)


class AuthResponse(BaseModel):
    """Response for sign-up/sign-in."""

    success: bool
    user: UserRecord
