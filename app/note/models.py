"""Note domain models."""

import uuid

from sqlmodel import Field, SQLModel

from app.core.mixins import TimestampMixin

TITLE_MAX_LENGTH = 100
CONTENT_MAX_LENGTH = 5000


class Note(TimestampMixin, SQLModel, table=True):
    """A short text note owned by one user."""

    __tablename__: str = "notes"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    user_id: uuid.UUID = Field(foreign_key="users.id", index=True)
    title: str = Field(max_length=TITLE_MAX_LENGTH)
    content: str = Field(max_length=CONTENT_MAX_LENGTH)
