"""Bearer token holder for the remote store."""

from __future__ import annotations

import time

# Treat a token as expired this many seconds early
_EXPIRY_BUFFER = 60


class StaticTokenSource:
    """A token obtained out of band (env var, config file, external OAuth helper)."""

    def __init__(self, token: str | None, expires_at: float | None = None) -> None:
        self._token = token or None
        self._expires_at = expires_at

    def is_valid(self) -> bool:
        if not self._token:
            return False
        if self._expires_at is None:
            return True
        return time.time() < self._expires_at - _EXPIRY_BUFFER

    def get_token(self) -> str | None:
        return self._token if self.is_valid() else None

    def set_token(self, token: str, expires_in: float | None = None) -> None:
        self._token = token
        self._expires_at = time.time() + expires_in if expires_in is not None else None

    def clear(self) -> None:
        self._token = None
        self._expires_at = None
