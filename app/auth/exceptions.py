"""Auth domain exceptions.

Credential failures are deliberately vague: the message never says which of
email, code or expiry did not match.
"""

from app.core.exceptions import AppException, AuthenticationError


class InvalidOtpError(AppException):
    """Raised when completing signup with a wrong, expired or used code."""

    status_code = 400
    error_type = "invalid_otp"

    def __init__(self, message: str = "Invalid or expired OTP"):
        super().__init__(message)


class OtpSignInError(AuthenticationError):
    """Raised when signing in with a code fails for any reason."""

    error_type = "unauthorized"

    def __init__(self, message: str = "Invalid credentials or OTP expired"):
        super().__init__(message)


class NoTokenError(AuthenticationError):
    """Raised when a protected route is called without a token."""

    error_type = "no_token"

    def __init__(self, message: str = "Access denied. No token provided."):
        super().__init__(message)


class InvalidTokenError(AuthenticationError):
    """Raised when a session token is malformed, expired or badly signed."""

    error_type = "invalid_token"

    def __init__(self, message: str = "Invalid token"):
        super().__init__(message)


class UnverifiedUserError(AuthenticationError):
    """Raised when a valid token points at a missing or unverified user."""

    error_type = "invalid_token_or_unverified_user"

    def __init__(self, message: str = "Invalid token or user not verified"):
        super().__init__(message)


class FederatedSignInError(AuthenticationError):
    """Raised when the identity provider handshake cannot produce a user."""

    error_type = "federated_sign_in_failed"

    def __init__(self, message: str = "Federated sign-in failed"):
        super().__init__(message)
