"""
Model package.

Importing this package registers every SQLModel ``table=True`` model in
``SQLModel.metadata``; ``init_db`` relies on it to create the tables.
"""

from app.note.models import Note  # noqa: F401
from app.user.models import User  # noqa: F401
