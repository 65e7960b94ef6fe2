"""User domain exceptions."""

from app.core.exceptions import ConflictError, NotFoundError


class UserNotFoundError(NotFoundError):
    """Raised when no (verified) user exists for the requested email."""

    def __init__(self, message: str = "User not found"):
        super().__init__(message)


class EmailExistsError(ConflictError):
    """Raised when signing up with an email that already has a verified account."""

    error_type = "email_exists"

    def __init__(self, message: str = "User already exists with this email"):
        super().__init__(message)
