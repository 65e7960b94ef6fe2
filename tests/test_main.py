"""Tests for app/main.py - Application lifespan and initialization."""

from unittest.mock import AsyncMock, patch

import pytest
from fastapi import FastAPI

from app.main import lifespan


@pytest.mark.asyncio
async def test_lifespan_initialization():
    """Test lifespan initializes the database and Resend, then closes HTTP."""
    mock_app = FastAPI()

    with (
        patch("app.main.init_db") as mock_db,
        patch("app.main.init_resend") as mock_resend,
        patch("app.main.close_google_client", new_callable=AsyncMock) as mock_close,
    ):
        async with lifespan(mock_app):
            mock_db.assert_called_once()
            mock_resend.assert_called_once()
            mock_close.assert_not_awaited()

        mock_close.assert_awaited_once()
