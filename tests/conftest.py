"""Shared test fixtures."""

from dataclasses import dataclass, field
from datetime import UTC, date, datetime
from pathlib import Path

import httpx
import pytest

from food_keeper.adapters.food_keeper_client import AuthClient, FoodItemsClient
from food_keeper.adapters.token_storage import TokenStorage
from food_keeper.config import Settings
from food_keeper.containers import AppContainer
from food_keeper.services.banners import BannerBoard
from food_keeper.services.export import ExportService
from food_keeper.services.food_items import FoodItemCollection
from food_keeper.services.guards import RouteGuard
from food_keeper.services.mutations import FoodItemMutations
from food_keeper.services.oauth import OAuthRedirectHandler
from food_keeper.services.sessions import SessionStore

VALID_TOKEN = "valid-token"


def http_error(
    status_code: int, payload: object | None = None, path: str = "/"
) -> httpx.HTTPStatusError:
    """Build the error httpx raises for a non-2xx response."""
    request = httpx.Request("GET", f"http://backend.test/api{path}")
    response = httpx.Response(status_code, json=payload, request=request)
    return httpx.HTTPStatusError(
        f"status {status_code}", request=request, response=response
    )


def food_payload(  # noqa: PLR0913
    item_id: int,
    name: str,
    *,
    description: str | None = None,
    calorie: int | None = None,
    quantity: str | None = None,
    consumed_date: datetime | None = None,
    created_at: datetime | None = None,
) -> dict[str, object]:
    """Food Service JSON for one item."""
    return {
        "id": item_id,
        "name": name,
        "description": description,
        "calorie": calorie,
        "quantity": quantity,
        "consumedDate": consumed_date.isoformat() if consumed_date else None,
        "createdAt": (created_at or datetime.now(tz=UTC)).isoformat(),
    }


@dataclass
class InMemoryTokenStorage(TokenStorage):
    """In-memory token slot for tests."""

    token: str | None = None
    clear_count: int = 0

    def load(self) -> str | None:
        return self.token

    def save(self, token: str) -> None:
        self.token = token

    def clear(self) -> None:
        self.token = None
        self.clear_count += 1


@dataclass
class FakeFoodKeeperClient(AuthClient, FoodItemsClient):
    """Fake backend that keeps users and items in memory."""

    token_storage: InMemoryTokenStorage
    user_payload: dict[str, object] = field(
        default_factory=lambda: {
            "id": 1,
            "email": "ada@example.com",
            "firstName": "Ada",
            "lastName": "Lovelace",
            "emailVerified": True,
            "profilePicture": None,
        }
    )
    password: str = "secret1"
    valid_tokens: set[str] = field(default_factory=lambda: {VALID_TOKEN})
    items: list[dict[str, object]] = field(default_factory=list)
    failures: dict[str, Exception] = field(default_factory=dict)
    calls: list[tuple[str, object]] = field(default_factory=list)
    next_id: int = 100

    def _record(self, name: str, argument: object = None) -> None:
        self.calls.append((name, argument))
        if name in self.failures:
            raise self.failures[name]

    def call_names(self) -> list[str]:
        return [name for name, _ in self.calls]

    async def register(self, payload: dict[str, object]) -> dict[str, object]:
        self._record("register", payload)
        return {"message": "Registered", "success": True}

    async def login(self, payload: dict[str, object]) -> dict[str, object]:
        self._record("login", payload)
        if (
            payload.get("email") != self.user_payload["email"]
            or payload.get("password") != self.password
        ):
            raise http_error(401, {"message": "Invalid email or password"}, "/auth/login")
        return {"token": VALID_TOKEN, "type": "Bearer", **self.user_payload}

    async def verify_email(self, payload: dict[str, object]) -> dict[str, object]:
        self._record("verify_email", payload)
        return {"message": "Email verified", "success": True}

    async def resend_verification(
        self, payload: dict[str, object]
    ) -> dict[str, object]:
        self._record("resend_verification", payload)
        return {"message": "OTP sent", "success": True}

    async def forgot_password(self, payload: dict[str, object]) -> dict[str, object]:
        self._record("forgot_password", payload)
        return {"message": "Reset OTP sent", "success": True}

    async def reset_password(self, payload: dict[str, object]) -> dict[str, object]:
        self._record("reset_password", payload)
        return {"message": "Password reset", "success": True}

    async def get_current_user(self, token: str | None = None) -> dict[str, object]:
        self._record("get_current_user", token)
        resolved = token or self.token_storage.load()
        if resolved not in self.valid_tokens:
            raise http_error(401, {"message": "Unauthorized"}, "/auth/me")
        return dict(self.user_payload)

    async def list_food_items(self) -> list[dict[str, object]]:
        self._record("list_food_items")
        return [dict(item) for item in self.items]

    async def create_food_item(self, payload: dict[str, object]) -> dict[str, object]:
        self._record("create_food_item", payload)
        created = {
            **payload,
            "id": self.next_id,
            "createdAt": datetime.now(tz=UTC).isoformat(),
        }
        self.next_id += 1
        self.items.append(created)
        return dict(created)

    async def update_food_item(
        self, item_id: int | str, payload: dict[str, object]
    ) -> dict[str, object]:
        self._record("update_food_item", (item_id, payload))
        for index, item in enumerate(self.items):
            if str(item["id"]) == str(item_id):
                self.items[index] = {**item, **payload}
                return dict(self.items[index])
        raise http_error(404, {"error": "Not found"}, f"/food-items/{item_id}")

    async def delete_food_item(self, item_id: int | str) -> None:
        self._record("delete_food_item", item_id)
        self.items = [item for item in self.items if str(item["id"]) != str(item_id)]

    async def search_food_items(self, name: str) -> list[dict[str, object]]:
        self._record("search_food_items", name)
        return [
            dict(item)
            for item in self.items
            if name.lower() in str(item["name"]).lower()
        ]

    async def export_csv(
        self, start_date: date | None = None, end_date: date | None = None
    ) -> bytes:
        self._record("export_csv", (start_date, end_date))
        return b"ID,Name,Description,Calories,Quantity,Created Date,Consumed Date\n"


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        api_base_url="http://backend.test/api",
        token_file=str(tmp_path / "token"),
    )


@pytest.fixture
def token_storage() -> InMemoryTokenStorage:
    return InMemoryTokenStorage()


@pytest.fixture
def api_client(token_storage: InMemoryTokenStorage) -> FakeFoodKeeperClient:
    return FakeFoodKeeperClient(token_storage=token_storage)


@pytest.fixture
def container(
    settings: Settings,
    token_storage: InMemoryTokenStorage,
    api_client: FakeFoodKeeperClient,
) -> AppContainer:
    session_store = SessionStore(client=api_client, token_storage=token_storage)
    food_items = FoodItemCollection(client=api_client)
    banners = BannerBoard(ttl_seconds=settings.banner_ttl_seconds)

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        token_storage=token_storage,
        session_store=session_store,
        route_guard=RouteGuard(session_store),
        oauth_handler=OAuthRedirectHandler(
            client=api_client, token_storage=token_storage, session=session_store
        ),
        food_items=food_items,
        banners=banners,
        mutations=FoodItemMutations(
            client=api_client, collection=food_items, banners=banners
        ),
        export_service=ExportService(api_client),
        close_resources=close_resources,
    )
