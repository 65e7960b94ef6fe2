from collections.abc import Generator

from sqlmodel import Session, SQLModel, create_engine
from sqlmodel.pool import StaticPool

from app.core.settings import get_settings

_settings = get_settings()

engine_kwargs: dict[str, object] = {}
if _settings.database_url.startswith("sqlite"):
    # Required for SQLite when used with FastAPI across threads.
    engine_kwargs["connect_args"] = {"check_same_thread": False}
    if _settings.database_url in {"sqlite://", "sqlite:///:memory:"}:
        # Share the single in-memory database across connections.
        engine_kwargs["poolclass"] = StaticPool

engine = create_engine(_settings.database_url, echo=False, **engine_kwargs)


def init_db() -> None:
    """Create missing tables for every registered model."""
    import app.models  # noqa: F401

    SQLModel.metadata.create_all(engine)


def get_session() -> Generator[Session, None, None]:
    with Session(engine) as session:
        yield session
