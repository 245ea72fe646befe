"""Session store for the signed-in user."""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field

import httpx

from food_keeper.adapters.food_keeper_client import AuthClient, error_message
from food_keeper.adapters.token_storage import TokenStorage
from food_keeper.domain.auth import (
    AuthResult,
    EmailVerification,
    LoginCredentials,
    PasswordReset,
    RegistrationData,
    UserProfile,
    parse_user_profile,
)
from food_keeper.errors import FoodKeeperError

logger = logging.getLogger(__name__)


@dataclass
class SessionStore:
    """Authentication state shared by every view of one application run.

    ``loading`` starts true and flips to false exactly once, when
    ``initialize`` settles.
    """

    client: AuthClient
    token_storage: TokenStorage
    token: str | None = None
    user: UserProfile | None = None
    is_authenticated: bool = False
    loading: bool = field(default=True)

    async def initialize(self) -> None:
        """Restore the session from the stored token, if any. Never raises."""
        stored_token = self.token_storage.load()
        if stored_token:
            try:
                payload = await self.client.get_current_user()
                self.user = parse_user_profile(payload)
                self.token = stored_token
                self.is_authenticated = True
            except (
                httpx.HTTPError,
                FoodKeeperError,
                KeyError,
                TypeError,
                ValueError,
            ):
                logger.info("Stored token rejected; starting signed out")
                self.token_storage.clear()
                self._reset()
        self.loading = False

    async def login(self, credentials: LoginCredentials) -> AuthResult:
        """Authenticate and persist the returned token."""
        try:
            payload = await self.client.login(credentials.to_payload())
        except (httpx.HTTPError, FoodKeeperError) as exc:
            logger.info("Login failed")
            return AuthResult.failed(error_message(exc, "Login failed"))
        user_fields = {key: value for key, value in payload.items() if key != "token"}
        token = payload.get("token")
        if not isinstance(token, str) or not token:
            return AuthResult.failed("Login failed")
        self.token_storage.save(token)
        self.token = token
        self.user = parse_user_profile(user_fields)
        self.is_authenticated = True
        return AuthResult.ok(payload)

    async def register(self, data: RegistrationData) -> AuthResult:
        """Create an account. Does not sign the user in."""
        return await self._call(
            self.client.register, data.to_payload(), "Registration failed"
        )

    async def verify_email(self, data: EmailVerification) -> AuthResult:
        """Confirm the email address with an OTP. Does not sign the user in."""
        return await self._call(
            self.client.verify_email, data.to_payload(), "Email verification failed"
        )

    async def resend_verification(self, email: str) -> AuthResult:
        """Ask the backend for a fresh verification OTP."""
        return await self._call(
            self.client.resend_verification,
            {"email": email},
            "Failed to resend verification",
        )

    async def forgot_password(self, email: str) -> AuthResult:
        """Ask the backend for a password reset OTP."""
        return await self._call(
            self.client.forgot_password, {"email": email}, "Failed to send reset email"
        )

    async def reset_password(self, data: PasswordReset) -> AuthResult:
        """Set a new password using a reset OTP."""
        return await self._call(
            self.client.reset_password, data.to_payload(), "Password reset failed"
        )

    def adopt(self, token: str, user: UserProfile) -> None:
        """Install a token that was already persisted and validated elsewhere."""
        self.token = token
        self.user = user
        self.is_authenticated = True
        self.loading = False

    def logout(self) -> None:
        """Drop the session locally. Takes effect without any network call."""
        self.token_storage.clear()
        self._reset()

    def _reset(self) -> None:
        self.token = None
        self.user = None
        self.is_authenticated = False

    async def _call(
        self,
        method: Callable[[dict[str, object]], Awaitable[dict[str, object]]],
        payload: dict[str, object],
        fallback: str,
    ) -> AuthResult:
        try:
            data = await method(payload)
        except (httpx.HTTPError, FoodKeeperError) as exc:
            logger.info("Auth request failed", extra={"operation": method.__name__})
            return AuthResult.failed(error_message(exc, fallback))
        return AuthResult.ok(data)
