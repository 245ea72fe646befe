"""FastAPI dependency that applies the route guard."""

from __future__ import annotations

from typing import TYPE_CHECKING
from urllib.parse import urlencode

from fastapi import HTTPException, Request, status

from food_keeper.services.guards import GuardState

if TYPE_CHECKING:
    from food_keeper.containers import AppContainer
    from food_keeper.domain.navigation import Redirect


def redirect_url(redirect: Redirect) -> str:
    """Render a redirect target, carrying its error as a query parameter."""
    if redirect.error:
        return f"{redirect.path}?{urlencode({'error': redirect.error})}"
    return redirect.path


async def require_admission(request: Request) -> None:
    """Let the request through only once the session is known to be valid."""
    container: AppContainer = request.app.state.container
    guard = container.route_guard
    state = guard.evaluate()
    if state == GuardState.CHECKING:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Checking authentication",
            headers={"Retry-After": "1"},
        )
    if state == GuardState.DENIED:
        raise HTTPException(
            status_code=status.HTTP_303_SEE_OTHER,
            headers={"Location": redirect_url(guard.denied_redirect())},
        )
