"""Authentication domain models."""

from collections.abc import Mapping
from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

OTP_LENGTH = 6
MIN_PASSWORD_LENGTH = 6


@dataclass(frozen=True)
class UserProfile:
    """Profile of the signed-in user as returned by the Auth Service."""

    id: int | str
    email: str
    first_name: str | None
    last_name: str | None
    email_verified: bool
    profile_picture: str | None = None
    provider: str | None = None


@dataclass(frozen=True)
class AuthResult:
    """Uniform outcome of an Auth Service call."""

    success: bool
    data: dict[str, object] | None = None
    error: str | None = None

    @classmethod
    def ok(cls, data: dict[str, object] | None) -> "AuthResult":
        """Build a successful result."""
        return cls(success=True, data=data or {})

    @classmethod
    def failed(cls, error: str) -> "AuthResult":
        """Build a failed result carrying a displayable message."""
        return cls(success=False, error=error)


class _AuthPayload(BaseModel):
    """Base for request bodies sent to the Auth Service in camelCase."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_payload(self) -> dict[str, object]:
        """Serialize the request the way the backend expects it."""
        return self.model_dump(by_alias=True, exclude_none=True)


class LoginCredentials(_AuthPayload):
    """Email and password login."""

    email: str
    password: str


class RegistrationData(_AuthPayload):
    """New account details."""

    first_name: str
    last_name: str
    email: str
    password: str


class EmailVerification(_AuthPayload):
    """OTP submitted to confirm email ownership."""

    email: str
    otp: str

    @field_validator("otp", mode="before")
    @classmethod
    def _digits_only(cls, value: object) -> str:
        digits = "".join(ch for ch in str(value or "") if ch.isdigit())
        if len(digits) != OTP_LENGTH:
            raise ValueError("Please enter a valid 6-digit OTP")
        return digits


class PasswordReset(_AuthPayload):
    """OTP plus the new password chosen by the user."""

    email: str
    otp: str
    new_password: str
    confirm_password: str = Field(exclude=True)

    @field_validator("otp", mode="before")
    @classmethod
    def _digits_only(cls, value: object) -> str:
        digits = "".join(ch for ch in str(value or "") if ch.isdigit())
        if len(digits) != OTP_LENGTH:
            raise ValueError("Please enter a valid 6-digit OTP")
        return digits

    @model_validator(mode="after")
    def _passwords_match(self) -> "PasswordReset":
        if self.new_password != self.confirm_password:
            raise ValueError("Passwords do not match")
        if len(self.new_password) < MIN_PASSWORD_LENGTH:
            raise ValueError("Password must be at least 6 characters long")
        return self


def parse_user_profile(payload: object) -> UserProfile:
    """Parse an Auth Service user payload into a profile.

    Raises ``ValueError`` when the payload is not a JSON object.
    """
    if not isinstance(payload, Mapping):
        raise ValueError(f"Expected a user object, got {type(payload).__name__}")
    return UserProfile(
        id=payload.get("id", ""),
        email=str(payload.get("email", "")),
        first_name=payload.get("firstName"),
        last_name=payload.get("lastName"),
        email_verified=bool(payload.get("emailVerified", False)),
        profile_picture=payload.get("profilePicture"),
        provider=payload.get("provider"),
    )
