"""Access control for protected views."""

from dataclasses import dataclass
from enum import StrEnum

from food_keeper.domain.navigation import LOGIN_PATH, Redirect
from food_keeper.services.sessions import SessionStore


class GuardState(StrEnum):
    """Outcome of a route guard check."""

    CHECKING = "checking"
    DENIED = "denied"
    ADMITTED = "admitted"


@dataclass
class RouteGuard:
    """Admit or turn away requests for protected views."""

    session: SessionStore

    def evaluate(self) -> GuardState:
        """Return the guard state for the current session."""
        if self.session.loading:
            return GuardState.CHECKING
        if not self.session.is_authenticated:
            return GuardState.DENIED
        return GuardState.ADMITTED

    def denied_redirect(self) -> Redirect:
        """Where denied requests go. The attempted destination is dropped."""
        return Redirect(LOGIN_PATH)
