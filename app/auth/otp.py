"""One-time code generation."""

import secrets

DEFAULT_OTP_LENGTH = 6


def generate_otp(length: int = DEFAULT_OTP_LENGTH) -> str:
    """Return ``length`` decimal digits drawn uniformly from a CSPRNG.

    Leading zeros are kept, so every code has exactly ``length`` characters.
    """
    if length < 1:
        raise ValueError("OTP length must be positive")
    return str(secrets.randbelow(10**length)).zfill(length)
