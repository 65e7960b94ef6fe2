"""User domain models.

SQLModel table definition for User, the credential store of the
one-time-code flow.
"""

import uuid
from datetime import date, datetime

from sqlalchemy import DateTime
from sqlmodel import Field, SQLModel

from app.core.mixins import TimestampMixin


def normalize_email(email: str) -> str:
    """Canonical form used for every lookup and write."""
    return email.strip().lower()


class User(TimestampMixin, SQLModel, table=True):
    """User database model.

    ``otp_code``/``otp_expires_at`` are internal-only and never exposed in
    API responses. Both are null when no code is outstanding.
    """

    __tablename__: str = "users"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    email: str = Field(index=True, unique=True, max_length=255)
    name: str = Field(default="", max_length=50)
    date_of_birth: date | None = Field(default=None)
    is_verified: bool = Field(default=False)
    otp_code: str | None = Field(default=None, max_length=16)
    otp_expires_at: datetime | None = Field(
        default=None, sa_type=DateTime(timezone=True)
    )
    google_id: str | None = Field(default=None, index=True, unique=True)
    profile_picture: str | None = Field(default=None, max_length=2048)

    def set_pending_code(self, code: str, expires_at: datetime) -> None:
        """Attach a fresh code, superseding any earlier one."""
        self.otp_code = code
        self.otp_expires_at = expires_at
