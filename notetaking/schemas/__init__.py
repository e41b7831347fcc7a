"""Pydantic schemas for request/response validation."""

from notetaking.schemas.base import CamelModel, MessageResponse
from notetaking.schemas.note import (
    NoteCreate,
    NoteUpdate,
    NoteResponse,
    NoteEnvelope,
    NoteListResponse,
)
from notetaking.schemas.user import (
    SendOTPRequest,
    VerifyOTPRequest,
    LoginRequest,
    GoogleAuthRequest,
    UserPublic,
    AuthResponse,
    CurrentUserResponse,
    OTPIssuedResponse,
    TokenPayload,
)

__all__ = [
    "CamelModel",
    "MessageResponse",
    "NoteCreate",
    "NoteUpdate",
    "NoteResponse",
    "NoteEnvelope",
    "NoteListResponse",
    "SendOTPRequest",
    "VerifyOTPRequest",
    "LoginRequest",
    "GoogleAuthRequest",
    "UserPublic",
    "AuthResponse",
    "CurrentUserResponse",
    "OTPIssuedResponse",
    "TokenPayload",
]
