"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import timedelta

from food_keeper.adapters.food_keeper_client import HttpxFoodKeeperClient
from food_keeper.adapters.token_storage import FileTokenStorage, TokenStorage
from food_keeper.config import Settings, resolve_token_path
from food_keeper.services.banners import BannerBoard
from food_keeper.services.export import ExportService
from food_keeper.services.food_items import FoodItemCollection
from food_keeper.services.guards import RouteGuard
from food_keeper.services.mutations import FoodItemMutations
from food_keeper.services.oauth import OAuthRedirectHandler
from food_keeper.services.sessions import SessionStore


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    token_storage: TokenStorage
    session_store: SessionStore
    route_guard: RouteGuard
    oauth_handler: OAuthRedirectHandler
    food_items: FoodItemCollection
    banners: BannerBoard
    mutations: FoodItemMutations
    export_service: ExportService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    token_storage = FileTokenStorage(resolve_token_path(resolved_settings.token_file))
    api_client = HttpxFoodKeeperClient.create(
        base_url=resolved_settings.api_base_url,
        token_storage=token_storage,
        timeout=resolved_settings.request_timeout_seconds,
    )
    session_store = SessionStore(client=api_client, token_storage=token_storage)
    api_client.on_unauthorized = session_store.logout
    food_items = FoodItemCollection(
        client=api_client,
        recent_window=timedelta(days=resolved_settings.recent_window_days),
    )
    banners = BannerBoard(ttl_seconds=resolved_settings.banner_ttl_seconds)

    async def close_resources() -> None:
        food_items.close()
        await api_client.close()

    return AppContainer(
        settings=resolved_settings,
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
