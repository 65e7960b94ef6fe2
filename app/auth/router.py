"""Auth domain router.

Thin HTTP handlers for the one-time-code flow, session cookies and the
Google redirect handshake. Business rules live in ``OtpAuthService``;
token validation lives in the request gate (``get_current_user``).
"""

import logging
import secrets
from urllib.parse import urlencode

from fastapi import APIRouter, Request, Response
from fastapi.responses import RedirectResponse

from app.auth.dependencies import (
    CurrentUserDep,
    GoogleOAuthDep,
    OtpAuthServiceDep,
    TokenServiceDep,
)
from app.auth.schemas import (
    AuthMessage,
    AuthSession,
    OtpSubmission,
    SigninCodeRequest,
    SignupCodeRequest,
)
from app.auth.tokens import TokenService
from app.core.constants import CommonResponses, RedirectMarkers, Routes
from app.core.deps import SettingsDep
from app.core.exceptions import AppException
from app.core.settings import Settings
from app.user.models import User
from app.user.schemas import CurrentUserResponse, UserPublicRead

logger = logging.getLogger(__name__)

OAUTH_STATE_COOKIE = "oauthState"
OAUTH_STATE_MAX_AGE = 600  # seconds
GOOGLE_PATH = Routes.AUTH.prefix + "/google"
GOOGLE_FAILURE_PATH = GOOGLE_PATH + "/failure"

router = APIRouter(
    prefix=Routes.AUTH.prefix,
    tags=[Routes.AUTH.tag],
    responses={**CommonResponses.BAD_REQUEST, **CommonResponses.TOO_MANY_REQUESTS},
)


def set_auth_cookie(response: Response, token: str, settings: Settings) -> None:
    response.set_cookie(
        key=settings.auth_cookie_name,
        value=token,
        max_age=int(settings.jwt_expires_in.total_seconds()),
        path="/",
        httponly=True,
        secure=settings.is_secure_cookie,
        samesite=settings.cookie_samesite,
    )


def clear_auth_cookie(response: Response, settings: Settings) -> None:
    response.delete_cookie(
        key=settings.auth_cookie_name,
        path="/",
        httponly=True,
        secure=settings.is_secure_cookie,
        samesite=settings.cookie_samesite,
    )


def _start_session(
    response: Response,
    user: User,
    token_service: TokenService,
    settings: Settings,
    message: str,
) -> AuthSession:
    token = token_service.issue(user.id, user.email)
    set_auth_cookie(response, token, settings)
    return AuthSession(
        message=message, token=token, user=UserPublicRead.model_validate(user)
    )


def _client_redirect(settings: Settings, marker: dict[str, str]) -> RedirectResponse:
    return RedirectResponse(url=f"{settings.client_url}?{urlencode(marker)}")


# --- One-time codes ---


@router.post(
    "/send-otp",
    response_model=AuthMessage,
    responses={**CommonResponses.CONFLICT},
)
async def send_otp(payload: SignupCodeRequest, service: OtpAuthServiceDep):
    """Start a signup: create or refresh the account and mail a code.

    A previously issued code for this email stops working.
    """
    service.request_signup_code(
        name=payload.name,
        email=payload.email,
        date_of_birth=payload.date_of_birth,
    )
    return AuthMessage(message="OTP sent successfully to your email")


@router.post(
    "/send-signin-otp",
    response_model=AuthMessage,
    responses={**CommonResponses.NOT_FOUND},
)
async def send_signin_otp(payload: SigninCodeRequest, service: OtpAuthServiceDep):
    """Mail a sign-in code to an already verified account."""
    service.request_signin_code(email=payload.email)
    return AuthMessage(message="OTP sent successfully to your email")


@router.post("/verify-otp", response_model=AuthSession)
async def verify_otp(
    payload: OtpSubmission,
    response: Response,
    service: OtpAuthServiceDep,
    token_service: TokenServiceDep,
    settings: SettingsDep,
):
    """Complete a signup with the mailed code and start a session."""
    user = service.complete_signup(email=payload.email, code=payload.otp)
    return _start_session(
        response, user, token_service, settings, "Account verified successfully"
    )


@router.post(
    "/signin",
    response_model=AuthSession,
    responses={**CommonResponses.UNAUTHORIZED},
)
async def signin(
    payload: OtpSubmission,
    response: Response,
    service: OtpAuthServiceDep,
    token_service: TokenServiceDep,
    settings: SettingsDep,
):
    """Sign in to a verified account with a mailed code."""
    user = service.sign_in(email=payload.email, code=payload.otp)
    return _start_session(
        response, user, token_service, settings, "Signed in successfully"
    )


# --- Session ---


@router.get(
    "/me",
    response_model=CurrentUserResponse,
    responses={**CommonResponses.UNAUTHORIZED},
)
async def get_me(user: CurrentUserDep):
    """Get current authenticated user."""
    return CurrentUserResponse(user=UserPublicRead.model_validate(user))


@router.post("/logout", response_model=AuthMessage)
async def logout(response: Response, settings: SettingsDep):
    """Clear the auth cookie. Always succeeds; tokens are stateless."""
    clear_auth_cookie(response, settings)
    return AuthMessage(message="Logged out successfully")


# --- Google ---


@router.get("/google", response_class=RedirectResponse)
async def google_start(google: GoogleOAuthDep, settings: SettingsDep):
    """Redirect the browser to Google's consent screen."""
    if not google.is_configured:
        logger.warning("Google sign-in requested but not configured")
        return RedirectResponse(url=GOOGLE_FAILURE_PATH)

    state = secrets.token_urlsafe(16)
    redirect = RedirectResponse(url=google.authorization_url(state))
    redirect.set_cookie(
        key=OAUTH_STATE_COOKIE,
        value=state,
        max_age=OAUTH_STATE_MAX_AGE,
        path=GOOGLE_PATH,
        httponly=True,
        secure=settings.is_secure_cookie,
        samesite="lax",
    )
    return redirect


@router.get("/google/callback", response_class=RedirectResponse)
async def google_callback(
    request: Request,
    service: OtpAuthServiceDep,
    google: GoogleOAuthDep,
    token_service: TokenServiceDep,
    settings: SettingsDep,
    code: str | None = None,
    state: str | None = None,
    error: str | None = None,
):
    """Finish the Google handshake, start a session, return to the client."""
    if error:
        logger.info("Google sign-in declined: %s", error, extra={"provider": "google"})
        return RedirectResponse(url=GOOGLE_FAILURE_PATH)

    expected_state = request.cookies.get(OAUTH_STATE_COOKIE)
    if (
        not code
        or not state
        or not expected_state
        or not secrets.compare_digest(state.encode(), expected_state.encode())
    ):
        logger.warning("Google callback with missing code or state mismatch")
        return _client_redirect(settings, RedirectMarkers.AUTH_FAILED)

    try:
        access_token = await google.exchange_code(code)
        profile = await google.fetch_profile(access_token)
        user = service.resolve_federated_user(profile)
        token = token_service.issue(user.id, user.email)
    except AppException as e:
        logger.info(
            "Google sign-in failed: %s - %s",
            e.error_type,
            e.message,
            extra={"provider": "google", "error_type": e.error_type},
        )
        return _client_redirect(settings, RedirectMarkers.AUTH_FAILED)

    redirect = _client_redirect(settings, RedirectMarkers.SUCCESS)
    set_auth_cookie(redirect, token, settings)
    redirect.delete_cookie(key=OAUTH_STATE_COOKIE, path=GOOGLE_PATH)
    logger.info("Google sign-in succeeded", extra={"user_id": user.id})
    return redirect


@router.get("/google/failure", response_class=RedirectResponse)
async def google_failure(settings: SettingsDep):
    """Send the browser back to the client with a failure marker."""
    return _client_redirect(settings, RedirectMarkers.GOOGLE_FAILED)
