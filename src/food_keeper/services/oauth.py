"""Completion of the OAuth2 login redirect."""

import logging
from collections.abc import Mapping
from dataclasses import dataclass

import httpx

from food_keeper.adapters.food_keeper_client import AuthClient
from food_keeper.adapters.token_storage import TokenStorage
from food_keeper.domain.auth import parse_user_profile
from food_keeper.domain.navigation import DASHBOARD_PATH, LOGIN_PATH, Redirect
from food_keeper.errors import FoodKeeperError
from food_keeper.services.sessions import SessionStore

logger = logging.getLogger(__name__)

OAUTH_FAILED = "OAuth2 authentication failed"
AUTHENTICATION_FAILED = "Authentication failed. Please try again."
NO_TOKEN_RECEIVED = "No authentication token received"


@dataclass
class OAuthRedirectHandler:
    """Turn the provider callback into a session or a login error.

    One attempt per arrival, never retried. Failures send the user back to
    the login view, where the OAuth2 flow has to be started again.
    """

    client: AuthClient
    token_storage: TokenStorage
    session: SessionStore

    async def complete(self, query: Mapping[str, str]) -> Redirect:
        """Handle one arrival at the redirect URL."""
        if query.get("error"):
            message = query.get("message") or OAUTH_FAILED
            logger.info("OAuth2 provider returned an error")
            return Redirect(LOGIN_PATH, error=message)

        token = query.get("token")
        if not token:
            return Redirect(LOGIN_PATH, error=NO_TOKEN_RECEIVED)

        # Persist first so later calls carry the new credential.
        self.token_storage.save(token)
        try:
            payload = await self.client.get_current_user(token=token)
            user = parse_user_profile(payload)
        except (
            httpx.HTTPError,
            FoodKeeperError,
            KeyError,
            TypeError,
            ValueError,
        ):
            logger.exception("OAuth2 login could not fetch the user profile")
            self.session.logout()
            return Redirect(LOGIN_PATH, error=AUTHENTICATION_FAILED)

        self.session.adopt(token, user)
        return Redirect(DASHBOARD_PATH)
