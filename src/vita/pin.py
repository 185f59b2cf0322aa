"""Local PIN gate. Not encryption: the remote document stays cleartext JSON."""

from __future__ import annotations

import hashlib
import hmac
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from vita.store.document import DocumentStore
    from vita.store.saver import SaveCoordinator


def hash_pin(pin: str, salt: str) -> str:
    """Hex SHA-256 of salt + pin."""
    return hashlib.sha256((salt + pin).encode("utf-8")).hexdigest()


class PinGate:
    """Checks and sets ``settings.pin_hash``."""

    def __init__(
        self, store: DocumentStore, saver: SaveCoordinator, salt: str, length: int = 4
    ) -> None:
        self._store = store
        self._saver = saver
        self._salt = salt
        self._length = length

    def has_pin(self) -> bool:
        return bool(self._store.get_settings().get("pin_hash"))

    def verify(self, pin: str) -> bool:
        expected = self._store.get_settings().get("pin_hash")
        if not expected:
            return False
        return hmac.compare_digest(hash_pin(pin, self._salt), expected)

    def set_pin(self, pin: str) -> None:
        if len(pin) != self._length or not pin.isdigit():
            raise ValueError(f"PIN must be exactly {self._length} digits")
        self._store.get_settings()["pin_hash"] = hash_pin(pin, self._salt)
        self._saver.request_save()

    def clear_pin(self) -> None:
        self._store.get_settings()["pin_hash"] = None
        self._saver.request_save()
