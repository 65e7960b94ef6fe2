"""Note domain router.

Every route requires an authenticated, verified user; notes are always
scoped to that user.
"""

import logging
import uuid

from fastapi import APIRouter, Depends, status
from sqlmodel import col, select

from app.auth.dependencies import CurrentUserDep, require_auth
from app.core.constants import CommonResponses, Routes
from app.core.deps import SessionDep
from app.note.exceptions import NoteNotFoundError
from app.note.models import Note
from app.note.schemas import NoteCreate, NoteCreated, NoteList, NoteMessage, NoteRead

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix=Routes.NOTES.prefix,
    tags=[Routes.NOTES.tag],
    dependencies=[Depends(require_auth)],
    responses={**CommonResponses.UNAUTHORIZED},
)


@router.post(
    "",
    response_model=NoteCreated,
    status_code=status.HTTP_201_CREATED,
    responses={**CommonResponses.BAD_REQUEST},
)
async def create_note(payload: NoteCreate, user: CurrentUserDep, session: SessionDep):
    """Create a note for the current user."""
    note = Note(user_id=user.id, title=payload.title, content=payload.content)
    session.add(note)
    session.commit()
    session.refresh(note)

    logger.info("Note created", extra={"user_id": user.id, "note_id": note.id})
    return NoteCreated(
        message="Note created successfully", note=NoteRead.model_validate(note)
    )


@router.get("", response_model=NoteList)
async def list_notes(user: CurrentUserDep, session: SessionDep):
    """List the current user's notes, newest first."""
    notes = session.exec(
        select(Note)
        .where(Note.user_id == user.id)
        .order_by(col(Note.created_at).desc())
    ).all()
    return NoteList(notes=[NoteRead.model_validate(note) for note in notes])


@router.delete(
    "/{note_id}",
    response_model=NoteMessage,
    responses={**CommonResponses.NOT_FOUND},
)
async def delete_note(note_id: uuid.UUID, user: CurrentUserDep, session: SessionDep):
    """Delete one of the current user's notes."""
    note = session.exec(
        select(Note).where(Note.id == note_id, Note.user_id == user.id)
    ).first()
    if note is None:
        raise NoteNotFoundError()

    session.delete(note)
    session.commit()

    logger.info("Note deleted", extra={"user_id": user.id, "note_id": note_id})
    return NoteMessage(message="Note deleted successfully")
