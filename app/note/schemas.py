"""Note domain schemas."""

import uuid
from datetime import UTC, datetime

from pydantic import field_serializer, field_validator
from sqlmodel import Field, SQLModel

from app.note.models import CONTENT_MAX_LENGTH, TITLE_MAX_LENGTH


class NoteCreate(SQLModel):
    """Request schema for creating a note."""

    title: str = Field(min_length=1, max_length=TITLE_MAX_LENGTH)
    content: str = Field(min_length=1, max_length=CONTENT_MAX_LENGTH)

    @field_validator("title", "content")
    @classmethod
    def not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value


class NoteRead(SQLModel):
    id: uuid.UUID
    title: str
    content: str
    created_at: datetime
    updated_at: datetime

    @field_serializer("created_at", "updated_at")
    def serialize_datetime(self, value: datetime) -> str:
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC).isoformat().replace("+00:00", "Z")


class NoteCreated(SQLModel):
    message: str
    note: NoteRead


class NoteList(SQLModel):
    notes: list[NoteRead]


class NoteMessage(SQLModel):
    message: str
