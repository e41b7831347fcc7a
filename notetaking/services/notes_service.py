"""Notes service: CRUD over the caller's own notes."""

import logging
from uuid import UUID

from sqlalchemy.orm import Session

from notetaking.models.note import Note
from notetaking.services.exceptions import NoteNotFoundError, ValidationError

logger = logging.getLogger(__name__)


class NotesService:
    """
    Service for managing notes.

    Every query is scoped to the owning user, so a note that belongs to
    someone else is indistinguishable from one that does not exist.
    """

    def __init__(self, db: Session):
        self.db = db

    def list_notes(self, user_id: UUID) -> list[Note]:
        """List a user's notes, newest first."""
        return (
            self.db.query(Note)
            .filter(Note.user_id == user_id)
            .order_by(Note.created_at.desc())
            .all()
        )

    def get_note(self, user_id: UUID, note_id: UUID) -> Note:
        """
        Get a note by ID (with ownership verification).

        Raises:
            NoteNotFoundError: If note doesn't exist or user doesn't own it
        """
        note = self.db.query(Note).filter(
            Note.id == note_id,
            Note.user_id == user_id,
        ).first()

        if not note:
            raise NoteNotFoundError(note_id)

        return note

    def create_note(self, user_id: UUID, title: str, content: str) -> Note:
        """
        Create a note.

        Raises:
            ValidationError: If title or content is blank
        """
        title, content = self._clean(title, content)

        note = Note(user_id=user_id, title=title, content=content)
        self.db.add(note)
        self.db.commit()
        self.db.refresh(note)

        logger.info(f"Created note {note.id} for user {user_id}")
        return note

    def update_note(self, user_id: UUID, note_id: UUID, title: str, content: str) -> Note:
        """
        Replace a note's title and content.

        Raises:
            ValidationError: If title or content is blank
            NoteNotFoundError: If note doesn't exist or user doesn't own it
        """
        title, content = self._clean(title, content)
        note = self.get_note(user_id, note_id)

        note.title = title
        note.content = content
        self.db.commit()
        self.db.refresh(note)

        logger.info(f"Updated note {note_id}")
        return note

    def delete_note(self, user_id: UUID, note_id: UUID) -> None:
        """
        Delete a note.

        Raises:
            NoteNotFoundError: If note doesn't exist or user doesn't own it
        """
        note = self.get_note(user_id, note_id)
        self.db.delete(note)
        self.db.commit()

        logger.info(f"Deleted note {note_id}")

    @staticmethod
    def _clean(title: str, content: str) -> tuple[str, str]:
        title = (title or "").strip()
        content = (content or "").strip()
        if not title or not content:
            raise ValidationError("Title and content are required")
        return title, content
