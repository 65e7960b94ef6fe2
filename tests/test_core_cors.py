"""Tests for app/core/cors.py - CORS middleware configuration."""

from unittest.mock import MagicMock

from fastapi.testclient import TestClient

from app.core.cors import add_cors_middleware
from app.core.settings import get_settings
from app.main import app


def test_add_cors_middleware():
    """Test add_cors_middleware() adds CORS with correct configuration."""
    mock_app = MagicMock()
    settings = get_settings()

    add_cors_middleware(mock_app)

    mock_app.add_middleware.assert_called_once()
    call_kwargs = mock_app.add_middleware.call_args[1]
    assert call_kwargs["allow_origins"] == settings.cors_origins_list
    assert call_kwargs["allow_credentials"] is True
    assert set(call_kwargs["allow_methods"]) == {"GET", "POST", "DELETE", "OPTIONS"}
    assert "Authorization" in call_kwargs["allow_headers"]
    assert "Retry-After" in call_kwargs["expose_headers"]


def test_cors_origins_list_parsing():
    """Test that Settings.cors_origins_list correctly parses CORS origins."""
    settings = get_settings()

    assert isinstance(settings.cors_origins_list, list)
    for origin in settings.cors_origins_list:
        assert isinstance(origin, str)
        assert origin.strip() == origin
        assert len(origin) > 0


def test_preflight_from_allowed_origin():
    origin = get_settings().cors_origins_list[0]
    client = TestClient(app)

    response = client.options(
        "/auth/me",
        headers={
            "Origin": origin,
            "Access-Control-Request-Method": "GET",
            "Access-Control-Request-Headers": "Authorization",
        },
    )

    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == origin
    assert response.headers["access-control-allow-credentials"] == "true"
