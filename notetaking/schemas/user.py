"""Pydantic schemas for user and authentication."""

from typing import Annotated, Optional
from uuid import UUID

from pydantic import AfterValidator, EmailStr, Field, field_validator

from notetaking.schemas.base import CamelModel


def _normalize_email(value: str) -> str:
    return value.strip().lower()


NormalizedEmail = Annotated[EmailStr, AfterValidator(_normalize_email)]


class SendOTPRequest(CamelModel):
    """Schema for requesting a signup code."""

    email: NormalizedEmail = Field(..., description="Email address to verify")
    name: str = Field(..., min_length=1, max_length=255, description="Display name")

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Name is required")
        return value


class VerifyOTPRequest(CamelModel):
    """Schema for completing a signup with the emailed code."""

    email: NormalizedEmail = Field(..., description="Email address the code was sent to")
    otp: str = Field(..., min_length=1, max_length=16, description="Numeric one-time code")
    password: str = Field(..., min_length=6, max_length=128, description="Chosen password")


class LoginRequest(CamelModel):
    """Schema for email/password login."""

    email: NormalizedEmail = Field(..., description="Account email")
    password: str = Field(..., min_length=1, max_length=128, description="Account password")


class GoogleAuthRequest(CamelModel):
    """Schema for Google sign-in."""

    credential: str = Field(..., min_length=1, description="Google ID token")


class UserPublic(CamelModel):
    """Public user profile returned to clients."""

    id: UUID
    name: str
    email: str
    is_email_verified: bool
    avatar: Optional[str] = None


class AuthResponse(CamelModel):
    """Schema for a successful signup, login or Google sign-in."""

    message: str
    token: str
    user: UserPublic


class CurrentUserResponse(CamelModel):
    """Schema for the current user endpoint."""

    user: UserPublic


class OTPIssuedResponse(CamelModel):
    """
    Acknowledgement of an issued code.

    ``otp`` and ``user_id`` are only filled in by the development-mode
    endpoint.
    """

    message: str
    otp: Optional[str] = None
    user_id: Optional[UUID] = None


class TokenPayload(CamelModel):
    """Schema for JWT token payload."""

    sub: Optional[str] = Field(default=None, description="Subject (user ID)")
    exp: Optional[int] = Field(default=None, description="Expiration timestamp")
