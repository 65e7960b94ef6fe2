"""Tests for app/core/email.py - email functionality."""

from unittest.mock import patch

import pytest

from app.core.email import ResendOtpNotifier, _render_template, init_resend
from app.core.settings import get_settings


@pytest.fixture(name="mail_settings")
def mail_settings_fixture(test_settings):
    return test_settings.model_copy(
        update={"resend_api_key": "re_test_key", "app_domain": "mail.example.com"}
    )


def test_init_resend():
    """Test init_resend() initializes Resend with API key from settings."""
    settings = get_settings()

    with patch("app.core.email.resend") as mock_resend:
        init_resend()

        if settings.resend_api_key:
            assert mock_resend.api_key == settings.resend_api_key


def test_init_resend_without_key_warns(caplog):
    settings = get_settings().model_copy(update={"resend_api_key": None})

    with (
        patch("app.core.email.get_settings", return_value=settings),
        caplog.at_level("WARNING", logger="app.core.email"),
    ):
        init_resend()

    assert "RESEND_API_KEY" in caplog.text


def test_render_template_escapes_name():
    html = _render_template(
        "otp-code.html",
        app_name="HD Notes",
        name="<script>alert(1)</script>",
        code="123456",
        expires_minutes=5,
    )

    assert "123456" in html
    assert "<script>" not in html
    assert "5 minutes" in html


def test_send_otp(mail_settings):
    """send_otp() sends the code via Resend with the expected envelope."""
    with patch("app.core.email.resend.Emails.send") as mock_send:
        ResendOtpNotifier(mail_settings).send_otp("ava@example.com", "Ava", "042137")

        mock_send.assert_called_once()
        call_args = mock_send.call_args[0][0]
        assert call_args["from"] == "noreply@mail.example.com"
        assert call_args["to"] == "ava@example.com"
        assert call_args["subject"] == "HD Notes - Your verification code"
        assert "042137" in call_args["html"]
        assert "Hello Ava" in call_args["html"]


def test_send_otp_propagates_provider_failure(mail_settings):
    with patch("app.core.email.resend.Emails.send", side_effect=RuntimeError("down")):
        with pytest.raises(RuntimeError):
            ResendOtpNotifier(mail_settings).send_otp("ava@example.com", "Ava", "1")


def test_send_otp_without_key_skips_delivery(test_settings, caplog):
    settings = test_settings.model_copy(update={"resend_api_key": None})

    with (
        patch("app.core.email.resend.Emails.send") as mock_send,
        caplog.at_level("WARNING", logger="app.core.email"),
    ):
        ResendOtpNotifier(settings).send_otp("ava@example.com", "Ava", "042137")

    mock_send.assert_not_called()
    assert "042137" in caplog.text


def test_send_otp_without_key_hides_code_in_production(test_settings, caplog):
    settings = test_settings.model_copy(
        update={"resend_api_key": None, "env_name": "production"}
    )

    with caplog.at_level("WARNING", logger="app.core.email"):
        ResendOtpNotifier(settings).send_otp("ava@example.com", "Ava", "042137")

    assert "042137" not in caplog.text
