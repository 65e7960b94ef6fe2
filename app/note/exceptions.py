"""Note domain exceptions."""

from app.core.exceptions import NotFoundError


class NoteNotFoundError(NotFoundError):
    """Raised when a note does not exist or belongs to another user."""

    def __init__(self, message: str = "Note not found"):
        super().__init__(message)
