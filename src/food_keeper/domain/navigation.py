"""Navigation targets produced by front-end flows."""

from dataclasses import dataclass

LOGIN_PATH = "/login"
DASHBOARD_PATH = "/dashboard"


@dataclass(frozen=True)
class Redirect:
    """Instruction to move the user to another view."""

    path: str
    error: str | None = None
