"""Auth domain dependencies.

``get_current_user`` is the request gate: the only place where a presented
token is turned into a verified user. Protected routes depend on it through
``CurrentUserDep`` or ``require_auth`` and never check credentials
themselves.
"""

from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlmodel import Session

from app.auth.exceptions import NoTokenError, UnverifiedUserError
from app.auth.google import GoogleOAuthClient, get_google_oauth_client
from app.auth.service import OtpAuthService
from app.auth.tokens import TokenService, get_token_service
from app.core.deps import SessionDep, SettingsDep
from app.core.email import Notifier, ResendOtpNotifier
from app.core.settings import Settings, get_settings
from app.db.engine import get_session
from app.user.models import User

security = HTTPBearer(auto_error=False)


def extract_token(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None,
    cookie_name: str,
) -> str | None:
    """Bearer header first, auth cookie as fallback."""
    if credentials is not None and credentials.credentials:
        return credentials.credentials
    return request.cookies.get(cookie_name) or None


def get_current_user(
    request: Request,
    session: Annotated[Session, Depends(get_session)],
    token_service: Annotated[TokenService, Depends(get_token_service)],
    settings: Annotated[Settings, Depends(get_settings)],
    credentials: Annotated[
        HTTPAuthorizationCredentials | None, Depends(security)
    ] = None,
) -> User:
    """Resolve the presented token to a verified local user.

    Args:
        request: FastAPI request (for the auth cookie)
        session: Database session
        token_service: Session token validator
        settings: Application settings (cookie name)
        credentials: Optional bearer token from Authorization header

    Returns:
        User model from local database

    Raises:
        NoTokenError: If neither header nor cookie carries a token
        InvalidTokenError: If the token fails validation
        UnverifiedUserError: If the user is missing or not verified
    """
    token = extract_token(request, credentials, settings.auth_cookie_name)
    if not token:
        raise NoTokenError()

    claims = token_service.verify(token)

    user = session.get(User, claims.id)
    if user is None or not user.is_verified:
        raise UnverifiedUserError()

    return user


# Type aliases for dependency injection
CurrentUserDep = Annotated[User, Depends(get_current_user)]
TokenServiceDep = Annotated[TokenService, Depends(get_token_service)]
GoogleOAuthDep = Annotated[GoogleOAuthClient, Depends(get_google_oauth_client)]


def require_auth(_user: CurrentUserDep) -> None:
    """Require authentication without injecting user into path operation.

    Use as a router-level dependency when all routes require auth:
        router = APIRouter(dependencies=[Depends(require_auth)])

    FastAPI caches dependencies, so CurrentUserDep in the handler does not
    validate the token twice.
    """


def get_notifier(settings: SettingsDep) -> Notifier:
    """Notifier used to deliver one-time codes."""
    return ResendOtpNotifier(settings)


def get_otp_auth_service(
    session: SessionDep,
    settings: SettingsDep,
    notifier: Annotated[Notifier, Depends(get_notifier)],
) -> OtpAuthService:
    return OtpAuthService(session=session, settings=settings, notifier=notifier)


OtpAuthServiceDep = Annotated[OtpAuthService, Depends(get_otp_auth_service)]
