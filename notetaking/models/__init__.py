"""Database models."""

from notetaking.models.user import User
from notetaking.models.note import Note

__all__ = ["User", "Note"]
