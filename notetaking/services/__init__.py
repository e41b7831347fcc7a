"""Service layer for business logic."""

from notetaking.services.auth_service import AuthService
from notetaking.services.notes_service import NotesService

__all__ = ["AuthService", "NotesService"]
