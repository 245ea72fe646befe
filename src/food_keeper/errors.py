"""Exceptions raised by the Food Keeper front-end."""

from pydantic import ValidationError


class FoodKeeperError(Exception):
    """Base class for Food Keeper errors."""


class SessionExpiredError(FoodKeeperError):
    """The backend rejected the bearer token and the session was torn down."""

    def __init__(self, path: str) -> None:
        super().__init__(f"Session expired while requesting {path}")
        self.path = path


class ValidationFailed(FoodKeeperError):  # noqa: N818
    """Client-side validation rejected user input before any network call."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class OperationFailed(FoodKeeperError):  # noqa: N818
    """A backend call failed; ``message`` is safe to show to the user."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


def first_error_message(exc: ValidationError) -> str:
    """Return the first human-readable message from a pydantic error."""
    errors = exc.errors()
    if not errors:
        return str(exc)
    error = errors[0]
    ctx = error.get("ctx") or {}
    if "error" in ctx:
        return str(ctx["error"])
    return str(error.get("msg", exc))
