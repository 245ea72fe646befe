"""Tests for OAuth2 redirect completion."""

import asyncio

from food_keeper.domain.navigation import DASHBOARD_PATH, LOGIN_PATH, Redirect
from food_keeper.services.oauth import OAuthRedirectHandler
from food_keeper.services.sessions import SessionStore
from tests.conftest import VALID_TOKEN, FakeFoodKeeperClient, InMemoryTokenStorage


def _handler(token: str | None = None) -> OAuthRedirectHandler:
    storage = InMemoryTokenStorage(token=token)
    client = FakeFoodKeeperClient(token_storage=storage)
    session = SessionStore(client=client, token_storage=storage)
    asyncio.run(session.initialize())
    return OAuthRedirectHandler(client=client, token_storage=storage, session=session)


def test_provider_error_keeps_stored_credentials() -> None:
    handler = _handler(token=VALID_TOKEN)

    redirect = asyncio.run(
        handler.complete({"error": "access_denied", "message": "User cancelled"})
    )

    assert redirect == Redirect(LOGIN_PATH, error="User cancelled")
    assert handler.token_storage.load() == VALID_TOKEN
    assert handler.session.is_authenticated is True


def test_provider_error_without_message_uses_generic_phrase() -> None:
    handler = _handler()

    redirect = asyncio.run(handler.complete({"error": "server_error"}))

    assert redirect.error == "OAuth2 authentication failed"


def test_missing_token_goes_back_to_login() -> None:
    handler = _handler()

    redirect = asyncio.run(handler.complete({}))

    assert redirect == Redirect(LOGIN_PATH, error="No authentication token received")
    assert handler.client.call_names() == []


def test_valid_token_signs_in_and_opens_dashboard() -> None:
    handler = _handler()

    redirect = asyncio.run(handler.complete({"token": VALID_TOKEN}))

    assert redirect == Redirect(DASHBOARD_PATH)
    assert handler.token_storage.load() == VALID_TOKEN
    assert handler.session.is_authenticated is True
    assert handler.session.user is not None
    assert handler.client.calls == [("get_current_user", VALID_TOKEN)]


def test_rejected_token_is_rolled_back() -> None:
    handler = _handler()

    redirect = asyncio.run(handler.complete({"token": "abc123"}))

    assert redirect == Redirect(
        LOGIN_PATH, error="Authentication failed. Please try again."
    )
    assert handler.token_storage.load() is None
    assert handler.session.is_authenticated is False
    assert handler.client.call_names() == ["get_current_user"]
