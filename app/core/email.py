"""Outbound email (Resend) for one-time codes."""

import logging
from typing import Protocol

import resend

from app.core.constants import JinjaEmailTemplatesEnv
from app.core.settings import Settings, get_settings

logger = logging.getLogger(__name__)


def _render_template(template_name: str, **context: object) -> str:
    """Render an email template from ``app/templates/emails``."""
    template = JinjaEmailTemplatesEnv.get_template(template_name)
    return template.render(**context)


def init_resend() -> None:
    """Initialize Resend with API key if available."""
    settings = get_settings()
    if not settings.resend_api_key:
        logger.warning("RESEND_API_KEY is not set; outgoing email is disabled")
        return
    resend.api_key = settings.resend_api_key


class Notifier(Protocol):
    """Delivers a one-time code to a user. Fire-and-forget, never retried."""

    def send_otp(self, to_email: str, name: str, code: str) -> None: ...


class ResendOtpNotifier:
    """Notifier that mails the code through Resend."""

    def __init__(self, settings: Settings):
        self._settings = settings

    def send_otp(self, to_email: str, name: str, code: str) -> None:
        """Send the one-time code email.

        Args:
            to_email: Recipient email address
            name: Display name used in the greeting
            code: The raw one-time code

        Raises:
            Whatever the Resend client raises; callers translate it.
        """
        settings = self._settings

        if not settings.resend_api_key:
            # Local development without a mail provider.
            if settings.is_secure_cookie:
                logger.warning("Email delivery disabled; code for %s not sent", to_email)
            else:
                logger.warning(
                    "Email delivery disabled; code for %s is %s", to_email, code
                )
            return

        html_content = _render_template(
            "otp-code.html",
            app_name=settings.app_name,
            name=name or to_email,
            code=code,
            expires_minutes=settings.otp_expire_minutes,
        )

        resend.Emails.send(
            {
                "from": f"noreply@{settings.app_domain}",
                "to": to_email,
                "subject": f"{settings.app_name} - Your verification code",
                "html": html_content,
            }
        )
