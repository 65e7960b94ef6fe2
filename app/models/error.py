"""Error response schema shared by every route."""

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Body of every error response.

    ``type`` is the stable machine-readable kind (``invalid_otp``,
    ``no_token``, ...); ``message`` is for humans only.
    """

    type: str = Field(examples=["invalid_otp"])
    message: str = Field(examples=["Invalid or expired OTP"])
