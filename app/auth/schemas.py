"""Auth domain schemas.

Request and response schemas for the one-time-code flow. Request models
accept both snake_case and the browser client's camelCase field names.
"""

from datetime import date

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from app.user.schemas import UserPublicRead


class SignupCodeRequest(BaseModel):
    """Request schema for starting a signup (sends a code)."""

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    name: str = Field(min_length=2, max_length=50)
    email: EmailStr
    date_of_birth: date = Field(alias="dateOfBirth")

    @field_validator("date_of_birth")
    @classmethod
    def not_in_future(cls, value: date) -> date:
        if value > date.today():
            raise ValueError("Date of birth cannot be in the future")
        return value


class SigninCodeRequest(BaseModel):
    """Request schema for asking a sign-in code for a verified account."""

    model_config = ConfigDict(str_strip_whitespace=True)

    email: EmailStr


class OtpSubmission(BaseModel):
    """Request schema for redeeming a code (signup completion or sign-in)."""

    model_config = ConfigDict(str_strip_whitespace=True)

    email: EmailStr
    otp: str = Field(min_length=1, max_length=16)


class AuthMessage(BaseModel):
    """Generic auth message response."""

    message: str


class AuthSession(BaseModel):
    """Response schema after a successful code redemption."""

    message: str
    token: str
    user: UserPublicRead
