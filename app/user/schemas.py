"""User domain schemas.

Security notes:
- otp_code / otp_expires_at and google_id are internal-only, never exposed
"""

import uuid
from datetime import UTC, date, datetime

from pydantic import EmailStr, field_serializer
from sqlmodel import SQLModel


class UserPublicRead(SQLModel):
    """Response schema for the authenticated user's own data."""

    id: uuid.UUID
    name: str
    email: EmailStr
    date_of_birth: date | None
    profile_picture: str | None
    is_verified: bool
    created_at: datetime
    updated_at: datetime

    @field_serializer("created_at", "updated_at")
    def serialize_datetime(self, value: datetime) -> str:
        """Format datetime as ISO 8601 string in UTC with a Z suffix."""
        if value.tzinfo is not None:
            utc_value = value.astimezone(UTC)
        else:
            # Naive datetime - stored as UTC by TimestampMixin
            utc_value = value.replace(tzinfo=UTC)

        return utc_value.replace(microsecond=0).isoformat().replace("+00:00", "Z")


class CurrentUserResponse(SQLModel):
    """Response schema for GET /auth/me."""

    user: UserPublicRead
