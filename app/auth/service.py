"""One-time-code authentication service.

Issues codes for signup and sign-in, verifies them exactly once, and
resolves federated identities to local users. Token issuance happens in the
router once this service has produced a verified ``User``.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, date, datetime

from sqlalchemy import update
from sqlmodel import Session, col, select

from app.auth.exceptions import FederatedSignInError, InvalidOtpError, OtpSignInError
from app.auth.otp import generate_otp
from app.core.email import Notifier
from app.core.exceptions import InternalError
from app.core.settings import Settings
from app.user.exceptions import EmailExistsError, UserNotFoundError
from app.user.models import User, normalize_email

logger = logging.getLogger(__name__)

NAME_MAX_LENGTH = 50


@dataclass(frozen=True)
class FederatedProfile:
    """Profile handed over by the identity provider after a successful handshake."""

    provider_id: str
    email: str | None
    name: str = ""
    picture: str | None = None
    email_verified: bool = True


def _utc_now() -> datetime:
    return datetime.now(UTC)


class OtpAuthService:
    """Code issuance, code verification and federated user resolution."""

    def __init__(
        self,
        session: Session,
        settings: Settings,
        notifier: Notifier,
        clock: Callable[[], datetime] = _utc_now,
    ):
        self._session = session
        self._settings = settings
        self._notifier = notifier
        self._clock = clock

    # --- Issuance ---

    def request_signup_code(
        self, *, name: str, email: str, date_of_birth: date
    ) -> User:
        """Create or refresh an unverified user and mail it a fresh code.

        Raises:
            EmailExistsError: If a verified account already uses this email
            InternalError: If the code could not be delivered
        """
        email = normalize_email(email)
        user = self._get_by_email(email)

        if user is not None and user.is_verified:
            raise EmailExistsError()

        if user is None:
            user = User(email=email)

        user.name = name.strip()
        user.date_of_birth = date_of_birth
        user.is_verified = False
        code = self._attach_code(user)

        self._deliver(user, code)
        return user

    def request_signin_code(self, *, email: str) -> User:
        """Attach a fresh code to a verified account and mail it.

        Raises:
            UserNotFoundError: If no verified account uses this email
            InternalError: If the code could not be delivered
        """
        email = normalize_email(email)
        user = self._session.exec(
            select(User).where(User.email == email, col(User.is_verified).is_(True))
        ).first()
        if user is None:
            raise UserNotFoundError("No verified account found with this email")

        code = self._attach_code(user)
        self._deliver(user, code)
        return user

    def _attach_code(self, user: User) -> str:
        code = generate_otp(self._settings.otp_length)
        user.set_pending_code(code, self._clock() + self._settings.otp_expires_in)
        self._session.add(user)
        self._session.commit()
        self._session.refresh(user)
        logger.info("One-time code issued", extra={"user_id": user.id})
        return code

    def _deliver(self, user: User, code: str) -> None:
        try:
            self._notifier.send_otp(user.email, user.name, code)
        except Exception as e:
            logger.error(
                "Failed to deliver one-time code",
                extra={"user_id": user.id},
                exc_info=True,
            )
            raise InternalError("Failed to send verification code") from e

    # --- Verification ---

    def complete_signup(self, *, email: str, code: str) -> User:
        """Redeem a signup code and mark the account verified.

        Raises:
            InvalidOtpError: If email/code do not match an unexpired code
        """
        user = self._claim_code(email, code, require_verified=False)
        if user is None:
            raise InvalidOtpError()
        return user

    def sign_in(self, *, email: str, code: str) -> User:
        """Redeem a sign-in code for an already verified account.

        Raises:
            OtpSignInError: If email/code do not match an unexpired code of a
                verified account
        """
        user = self._claim_code(email, code, require_verified=True)
        if user is None:
            raise OtpSignInError()
        return user

    def _claim_code(
        self, email: str, code: str, *, require_verified: bool
    ) -> User | None:
        """Atomically consume a matching, unexpired code.

        The match and the clearing happen in one conditional UPDATE, so two
        concurrent requests holding the same code cannot both succeed: the
        loser sees a row count of zero.
        """
        email = normalize_email(email)
        conditions = [
            col(User.email) == email,
            col(User.otp_code) == code,
            col(User.otp_expires_at) > self._clock(),
        ]
        if require_verified:
            conditions.append(col(User.is_verified).is_(True))

        statement = (
            update(User)
            .where(*conditions)
            .values(otp_code=None, otp_expires_at=None, is_verified=True)
        )
        result = self._session.connection().execute(statement)

        if result.rowcount != 1:
            self._session.rollback()
            logger.info("One-time code rejected")
            return None

        self._session.commit()
        user = self._session.exec(select(User).where(User.email == email)).one()
        logger.info("One-time code redeemed", extra={"user_id": user.id})
        return user

    # --- Federated sign-in ---

    def resolve_federated_user(self, profile: FederatedProfile) -> User:
        """Find or create the local user for a federated identity.

        Resolution order: provider id, then email (link and verify), then a
        new verified user.

        Raises:
            FederatedSignInError: If the provider gave no usable email
        """
        user = self._session.exec(
            select(User).where(User.google_id == profile.provider_id)
        ).first()
        if user is not None:
            return user

        if not profile.email or not profile.email_verified:
            logger.warning("Federated profile without a usable email")
            raise FederatedSignInError("No verified email in provider profile")

        email = normalize_email(profile.email)
        user = self._get_by_email(email)

        if user is not None:
            user.google_id = profile.provider_id
            user.is_verified = True
            if not user.profile_picture:
                user.profile_picture = profile.picture
            logger.info("Linked federated identity", extra={"user_id": user.id})
        else:
            user = User(
                email=email,
                name=(profile.name or email.split("@")[0])[:NAME_MAX_LENGTH],
                google_id=profile.provider_id,
                profile_picture=profile.picture,
                is_verified=True,
            )
            logger.info("Creating user from federated identity")

        self._session.add(user)
        self._session.commit()
        self._session.refresh(user)
        return user

    def _get_by_email(self, email: str) -> User | None:
        return self._session.exec(select(User).where(User.email == email)).first()
