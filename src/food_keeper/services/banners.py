"""Transient success and error banners."""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta


@dataclass(frozen=True)
class Banner:
    """A message shown above the item list."""

    kind: str
    text: str
    expires_at: datetime | None = None


@dataclass
class BannerBoard:
    """Holds at most one success and one error banner.

    Success banners expire after ``ttl_seconds``; a newer message simply
    replaces the older one. Error banners stay until the next operation.
    """

    ttl_seconds: int = 3
    _success: Banner | None = None
    _error: Banner | None = None

    def clear(self) -> None:
        """Drop both banners; called when a new operation starts."""
        self._success = None
        self._error = None

    def success(self, text: str) -> None:
        """Show a confirmation that clears itself."""
        expires_at = datetime.now(tz=UTC) + timedelta(seconds=self.ttl_seconds)
        self._success = Banner(kind="success", text=text, expires_at=expires_at)

    def error(self, text: str) -> None:
        """Show an error that stays until cleared."""
        self._error = Banner(kind="error", text=text)

    @property
    def success_text(self) -> str | None:
        """Current confirmation text, if it has not expired."""
        banner = self._success
        if banner is None:
            return None
        if banner.expires_at is not None and datetime.now(tz=UTC) >= banner.expires_at:
            self._success = None
            return None
        return banner.text

    @property
    def error_text(self) -> str | None:
        """Current error text, if any."""
        return self._error.text if self._error else None
