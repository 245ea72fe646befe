"""REST client for the Food Keeper backend."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date
from typing import Protocol

import httpx

from food_keeper.adapters.token_storage import TokenStorage
from food_keeper.errors import SessionExpiredError

logger = logging.getLogger(__name__)

# Sign-in and recovery endpoints never carry or tear down the session token.
CREDENTIAL_PATHS = (
    "/auth/login",
    "/auth/register",
    "/auth/verify-email",
    "/auth/resend-verification",
    "/auth/forgot-password",
    "/auth/reset-password",
)


class AuthClient(Protocol):
    """Interface for Auth Service interactions."""

    async def register(self, payload: dict[str, object]) -> dict[str, object]:
        """Create an account."""

    async def login(self, payload: dict[str, object]) -> dict[str, object]:
        """Authenticate and return the token with user fields."""

    async def verify_email(self, payload: dict[str, object]) -> dict[str, object]:
        """Consume an email verification OTP."""

    async def resend_verification(
        self, payload: dict[str, object]
    ) -> dict[str, object]:
        """Reissue an email verification OTP."""

    async def forgot_password(self, payload: dict[str, object]) -> dict[str, object]:
        """Issue a password reset OTP."""

    async def reset_password(self, payload: dict[str, object]) -> dict[str, object]:
        """Consume a reset OTP and set a new password."""

    async def get_current_user(self, token: str | None = None) -> dict[str, object]:
        """Validate a token and return the user profile."""


class FoodItemsClient(Protocol):
    """Interface for Food Service interactions."""

    async def list_food_items(self) -> list[dict[str, object]]:
        """Return every food item of the signed-in user."""

    async def create_food_item(self, payload: dict[str, object]) -> dict[str, object]:
        """Create a food item and return it."""

    async def update_food_item(
        self, item_id: int | str, payload: dict[str, object]
    ) -> dict[str, object]:
        """Update a food item and return it."""

    async def delete_food_item(self, item_id: int | str) -> None:
        """Delete a food item."""

    async def search_food_items(self, name: str) -> list[dict[str, object]]:
        """Server-side name search."""

    async def export_csv(
        self, start_date: date | None = None, end_date: date | None = None
    ) -> bytes:
        """Download food items as CSV bytes."""


@dataclass
class HttpxFoodKeeperClient:
    """Backend client implemented with httpx.

    Every request except the credential endpoints carries the stored bearer
    token when one exists. A 401 answer to a request that carried a token
    clears the stored token, notifies ``on_unauthorized`` and raises
    ``SessionExpiredError`` instead of handing the response back to the
    caller. Credential endpoints answer bad input with 401 too, so their
    errors always reach the caller.
    """

    token_storage: TokenStorage
    http_client: httpx.AsyncClient
    timeout: float = 10.0
    on_unauthorized: Callable[[], None] | None = field(default=None, repr=False)

    def __post_init__(self) -> None:
        self.http_client.event_hooks = {
            "request": [self._attach_token],
            "response": [self._check_unauthorized],
        }

    @classmethod
    def create(
        cls, base_url: str, token_storage: TokenStorage, timeout: float = 10.0
    ) -> "HttpxFoodKeeperClient":
        """Create a client with a managed httpx session."""
        http_client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            headers={"Content-Type": "application/json"},
        )
        return cls(token_storage=token_storage, http_client=http_client, timeout=timeout)

    async def _attach_token(self, request: httpx.Request) -> None:
        if "Authorization" in request.headers or _is_credential_request(request):
            return
        token = self.token_storage.load()
        if token:
            request.headers["Authorization"] = f"Bearer {token}"

    async def _check_unauthorized(self, response: httpx.Response) -> None:
        if response.status_code != httpx.codes.UNAUTHORIZED:
            return
        if "Authorization" not in response.request.headers:
            return
        if _is_credential_request(response.request):
            return
        path = response.request.url.path
        logger.warning("Backend rejected bearer token", extra={"path": path})
        self.token_storage.clear()
        if self.on_unauthorized is not None:
            self.on_unauthorized()
        raise SessionExpiredError(path)

    async def _post(self, path: str, payload: dict[str, object]) -> dict[str, object]:
        response = await self.http_client.post(path, json=payload, timeout=self.timeout)
        response.raise_for_status()
        return _json_or_empty(response)

    async def register(self, payload: dict[str, object]) -> dict[str, object]:
        """Create an account."""
        return await self._post("/auth/register", payload)

    async def login(self, payload: dict[str, object]) -> dict[str, object]:
        """Authenticate with email and password."""
        return await self._post("/auth/login", payload)

    async def verify_email(self, payload: dict[str, object]) -> dict[str, object]:
        """Consume an email verification OTP."""
        return await self._post("/auth/verify-email", payload)

    async def resend_verification(
        self, payload: dict[str, object]
    ) -> dict[str, object]:
        """Reissue an email verification OTP."""
        return await self._post("/auth/resend-verification", payload)

    async def forgot_password(self, payload: dict[str, object]) -> dict[str, object]:
        """Issue a password reset OTP."""
        return await self._post("/auth/forgot-password", payload)

    async def reset_password(self, payload: dict[str, object]) -> dict[str, object]:
        """Consume a reset OTP and set a new password."""
        return await self._post("/auth/reset-password", payload)

    async def get_current_user(self, token: str | None = None) -> dict[str, object]:
        """Fetch the profile for the stored token, or for ``token`` when given."""
        headers = {"Authorization": f"Bearer {token}"} if token else None
        response = await self.http_client.get(
            "/auth/me", headers=headers, timeout=self.timeout
        )
        response.raise_for_status()
        return response.json()

    async def list_food_items(self) -> list[dict[str, object]]:
        """Return every food item of the signed-in user."""
        response = await self.http_client.get("/food-items", timeout=self.timeout)
        response.raise_for_status()
        return response.json() or []

    async def create_food_item(self, payload: dict[str, object]) -> dict[str, object]:
        """Create a food item."""
        return await self._post("/food-items", payload)

    async def update_food_item(
        self, item_id: int | str, payload: dict[str, object]
    ) -> dict[str, object]:
        """Update a food item."""
        response = await self.http_client.put(
            f"/food-items/{item_id}", json=payload, timeout=self.timeout
        )
        response.raise_for_status()
        return response.json()

    async def delete_food_item(self, item_id: int | str) -> None:
        """Delete a food item."""
        response = await self.http_client.delete(
            f"/food-items/{item_id}", timeout=self.timeout
        )
        response.raise_for_status()

    async def search_food_items(self, name: str) -> list[dict[str, object]]:
        """Search food items by name on the server."""
        response = await self.http_client.get(
            "/food-items/search", params={"name": name}, timeout=self.timeout
        )
        response.raise_for_status()
        return response.json() or []

    async def export_csv(
        self, start_date: date | None = None, end_date: date | None = None
    ) -> bytes:
        """Download food items as CSV, optionally bounded by dates."""
        params: dict[str, str] = {}
        if start_date is not None:
            params["startDate"] = start_date.isoformat()
        if end_date is not None:
            params["endDate"] = end_date.isoformat()
        response = await self.http_client.get(
            "/food-items/export", params=params, timeout=self.timeout
        )
        response.raise_for_status()
        return response.content

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()


def _is_credential_request(request: httpx.Request) -> bool:
    return request.url.path.endswith(CREDENTIAL_PATHS)


def _json_or_empty(response: httpx.Response) -> dict[str, object]:
    """Decode a JSON object body, tolerating empty or non-object bodies."""
    if not response.content:
        return {}
    try:
        data = response.json()
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {"data": data}


def error_message(exc: Exception, fallback: str) -> str:
    """Derive a displayable message from a failed backend call.

    Priority: server ``message``, server ``error``, transport text, fallback.
    """
    if isinstance(exc, httpx.HTTPStatusError):
        body = _json_or_empty(exc.response)
        for key in ("message", "error"):
            value = body.get(key)
            if isinstance(value, str) and value.strip():
                return value
        return f"Request failed with status code {exc.response.status_code}"
    if isinstance(exc, httpx.RequestError):
        text = str(exc).strip()
        if text:
            return text
    return fallback
