import inspect
import os
from datetime import UTC, date, datetime, timedelta
from unittest.mock import MagicMock

# Settings are read at import time by app.db.engine; configure before importing app.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET", "test-jwt-secret-with-enough-entropy-123456")
os.environ.setdefault("ENV_NAME", "test")
os.environ.setdefault("RATE_LIMIT_MAX_REQUESTS", "0")
os.environ.setdefault("LOG_REQUESTS", "false")

import anyio  # noqa: E402
import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlmodel import Session, SQLModel, create_engine  # noqa: E402
from sqlmodel.pool import StaticPool  # noqa: E402

import app.models  # noqa: E402, F401
from app.auth.dependencies import get_notifier  # noqa: E402
from app.auth.tokens import TokenService, get_token_service  # noqa: E402
from app.core.email import Notifier  # noqa: E402
from app.core.settings import Settings, get_settings  # noqa: E402
from app.db.engine import get_session  # noqa: E402
from app.main import app  # noqa: E402
from app.user.models import User  # noqa: E402

TEST_JWT_SECRET = "test-jwt-secret-with-enough-entropy-123456"


def pytest_configure(config: pytest.Config) -> None:
    # Tests use @pytest.mark.asyncio, but we intentionally rely on anyio.
    config.addinivalue_line(
        "markers",
        "asyncio: run async tests using anyio (project-local hook)",
    )


@pytest.hookimpl(tryfirst=True)
def pytest_pyfunc_call(pyfuncitem: pytest.Function) -> bool | None:
    """Run @pytest.mark.asyncio tests with anyio.

    This avoids adding an external pytest-asyncio dependency.
    """
    if pyfuncitem.get_closest_marker("asyncio") is None:
        return None

    test_func = pyfuncitem.obj
    if not inspect.iscoroutinefunction(test_func):
        return None

    funcargs = {
        name: pyfuncitem.funcargs[name] for name in pyfuncitem._fixtureinfo.argnames
    }

    async def _run_async_test() -> None:
        await test_func(**funcargs)

    anyio.run(_run_async_test)
    return True


def make_settings(**overrides) -> Settings:
    """Build test settings without reading the environment file."""
    values = {
        "env_name": "test",
        "database_url": "sqlite://",
        "jwt_secret": TEST_JWT_SECRET,
        "jwt_expire_days": 7,
        "otp_length": 6,
        "otp_expire_minutes": 5,
        "client_url": "http://localhost:5173",
        "rate_limit_max_requests": 0,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture(name="session")
def session_fixture():
    """Create an in-memory SQLite database for testing."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    with Session(engine) as session:
        yield session


@pytest.fixture(name="test_settings")
def test_settings_fixture() -> Settings:
    return make_settings()


@pytest.fixture(name="token_service")
def token_service_fixture(test_settings: Settings) -> TokenService:
    return TokenService(
        secret=test_settings.jwt_secret, expires_in=test_settings.jwt_expires_in
    )


@pytest.fixture(name="mock_notifier")
def mock_notifier_fixture():
    """Notifier double recording every code sent."""
    return MagicMock(spec=Notifier)


@pytest.fixture(name="test_user")
def test_user_fixture(session: Session):
    """Create a verified test user in the database."""
    user = User(
        email="test@example.com",
        name="Test User",
        date_of_birth=date(1990, 1, 1),
        is_verified=True,
    )
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


@pytest.fixture(name="unverified_user")
def unverified_user_fixture(session: Session):
    """Create a user who started signup but never redeemed the code."""
    user = User(
        email="pending@example.com",
        name="Pending User",
        date_of_birth=date(1992, 5, 17),
        is_verified=False,
        otp_code="654321",
        otp_expires_at=datetime.now(UTC) + timedelta(minutes=5),
    )
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


@pytest.fixture(name="client")
def client_fixture(
    session: Session,
    test_settings: Settings,
    token_service: TokenService,
    mock_notifier: MagicMock,
):
    """Create a test client with overridden dependencies (no auth override)."""
    app.dependency_overrides[get_session] = lambda: session
    app.dependency_overrides[get_settings] = lambda: test_settings
    app.dependency_overrides[get_token_service] = lambda: token_service
    app.dependency_overrides[get_notifier] = lambda: mock_notifier

    client = TestClient(app)
    yield client

    app.dependency_overrides.clear()


@pytest.fixture(name="auth_headers")
def auth_headers_fixture(test_user: User, token_service: TokenService):
    """Bearer header for the verified test user."""
    token = token_service.issue(test_user.id, test_user.email)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture(name="sent_code")
def sent_code_fixture(mock_notifier: MagicMock):
    """Return the code passed to the most recent notifier call."""

    def _sent_code() -> str:
        return mock_notifier.send_otp.call_args.args[2]

    return _sent_code
