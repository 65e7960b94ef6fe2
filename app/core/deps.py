"""Centralized dependency type aliases for FastAPI routes.

Domain-specific dependencies (current user, token service, ...) live in
their own domain modules, e.g. ``app.auth.dependencies``.
"""

from typing import Annotated

from fastapi import Depends
from sqlmodel import Session

from app.core.settings import Settings, get_settings
from app.db.engine import get_session

# Database session
SessionDep = Annotated[Session, Depends(get_session)]

# Application settings
SettingsDep = Annotated[Settings, Depends(get_settings)]
