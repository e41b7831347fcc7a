"""Pydantic schemas for note endpoints."""

from datetime import datetime
from uuid import UUID

from pydantic import Field, field_validator

from notetaking.schemas.base import CamelModel


class NoteCreate(CamelModel):
    """Schema for creating a note."""

    title: str = Field(..., max_length=200, description="Note title")
    content: str = Field(..., description="Note body")

    @field_validator("title", "content")
    @classmethod
    def not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be empty")
        return value


class NoteUpdate(NoteCreate):
    """Schema for replacing a note's title and content."""


class NoteResponse(CamelModel):
    """Schema for a single note."""

    id: UUID
    user_id: UUID
    title: str
    content: str
    created_at: datetime
    updated_at: datetime


class NoteEnvelope(CamelModel):
    note: NoteResponse


class NoteListResponse(CamelModel):
    notes: list[NoteResponse]
