"""Durable storage for the bearer token."""

import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)


class TokenStorage(Protocol):
    """Single-slot key-value store holding the bearer token."""

    def load(self) -> str | None:
        """Return the stored token, if present."""

    def save(self, token: str) -> None:
        """Replace the stored token."""

    def clear(self) -> None:
        """Remove the stored token."""


@dataclass
class FileTokenStorage(TokenStorage):
    """Token storage backed by a single file readable only by its owner."""

    path: Path

    def load(self) -> str | None:
        """Read the token file."""
        try:
            token = self.path.read_text(encoding="utf-8").strip()
        except FileNotFoundError:
            return None
        return token or None

    def save(self, token: str) -> None:
        """Replace the token file atomically, creating its directory when needed.

        The token is written to an owner-only temporary file that then
        replaces the old one.
        """
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=".token-")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(token)
            os.replace(tmp_name, self.path)
        except OSError:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def clear(self) -> None:
        """Delete the token file if it exists."""
        self.path.unlink(missing_ok=True)
        logger.info("Cleared stored token", extra={"path": str(self.path)})
