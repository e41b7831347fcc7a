"""Note endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status

from notetaking.api.dependencies import get_current_user_id, get_notes_service
from notetaking.schemas.base import MessageResponse
from notetaking.schemas.note import (
    NoteCreate,
    NoteUpdate,
    NoteResponse,
    NoteEnvelope,
    NoteListResponse,
)
from notetaking.services.exceptions import NoteNotFoundError, ValidationError
from notetaking.services.notes_service import NotesService

router = APIRouter()


def _not_found(note_id: UUID) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"Note {note_id} not found",
    )


@router.get(
    "",
    response_model=NoteListResponse,
    summary="List notes",
    description="List the current user's notes, newest first.",
)
def list_notes(
    user_id: UUID = Depends(get_current_user_id),
    notes_service: NotesService = Depends(get_notes_service),
) -> NoteListResponse:
    notes = notes_service.list_notes(user_id)
    return NoteListResponse(notes=[NoteResponse.model_validate(note) for note in notes])


@router.post(
    "",
    response_model=NoteEnvelope,
    status_code=status.HTTP_201_CREATED,
    summary="Create a note",
)
def create_note(
    data: NoteCreate,
    user_id: UUID = Depends(get_current_user_id),
    notes_service: NotesService = Depends(get_notes_service),
) -> NoteEnvelope:
    try:
        note = notes_service.create_note(user_id, data.title, data.content)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)

    return NoteEnvelope(note=NoteResponse.model_validate(note))


@router.get(
    "/{note_id}",
    response_model=NoteEnvelope,
    summary="Get a note",
)
def get_note(
    note_id: UUID,
    user_id: UUID = Depends(get_current_user_id),
    notes_service: NotesService = Depends(get_notes_service),
) -> NoteEnvelope:
    try:
        note = notes_service.get_note(user_id, note_id)
    except NoteNotFoundError:
        raise _not_found(note_id)

    return NoteEnvelope(note=NoteResponse.model_validate(note))


@router.put(
    "/{note_id}",
    response_model=NoteEnvelope,
    summary="Update a note",
    description="Replace the title and content of one of the current user's notes.",
)
def update_note(
    note_id: UUID,
    data: NoteUpdate,
    user_id: UUID = Depends(get_current_user_id),
    notes_service: NotesService = Depends(get_notes_service),
) -> NoteEnvelope:
    try:
        note = notes_service.update_note(user_id, note_id, data.title, data.content)
    except NoteNotFoundError:
        raise _not_found(note_id)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)

    return NoteEnvelope(note=NoteResponse.model_validate(note))


@router.delete(
    "/{note_id}",
    response_model=MessageResponse,
    summary="Delete a note",
)
def delete_note(
    note_id: UUID,
    user_id: UUID = Depends(get_current_user_id),
    notes_service: NotesService = Depends(get_notes_service),
) -> MessageResponse:
    try:
        notes_service.delete_note(user_id, note_id)
    except NoteNotFoundError:
        raise _not_found(note_id)

    return MessageResponse(message="Note deleted successfully")
