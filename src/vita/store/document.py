"""The canonical in-memory document and its lazily-initializing accessors."""

from __future__ import annotations

import json
import logging
import re
from datetime import date, datetime
from typing import TYPE_CHECKING, Any

from vita.errors import MigrationDataError
from vita.store.migrations import migrate, repair_day
from vita.store.schema import new_day, new_document

if TYPE_CHECKING:
    from vita.store.binding import RemoteFileBinding

logger = logging.getLogger(__name__)

_DATE_KEY = re.compile(r"\d{4}-\d{2}-\d{2}", re.ASCII)


def _date_key(day: str | date) -> str:
    """Normalize a date or 'YYYY-MM-DD' string; reject anything else."""
    if isinstance(day, date):
        return day.strftime("%Y-%m-%d")
    if not isinstance(day, str) or not _DATE_KEY.fullmatch(day):
        raise ValueError(f"Date key must be YYYY-MM-DD, got {day!r}")
    datetime.strptime(day, "%Y-%m-%d")  # raises ValueError on impossible dates
    return day


class DocumentStore:
    """Owns the one live document. Feature code mutates it through the accessors."""

    def __init__(self, binding: RemoteFileBinding) -> None:
        self._binding = binding
        self._data: dict[str, Any] | None = None

    @property
    def loaded(self) -> bool:
        return self._data is not None

    @property
    def _doc(self) -> dict[str, Any]:
        if self._data is None:
            raise RuntimeError("Document not loaded. Call load() first.")
        return self._data

    # ── Load / persist ───────────────────────────────────────

    async def load(self) -> dict[str, Any]:
        """Fetch and migrate the remote document, or start fresh if none exists.

        Read and decode failures propagate: the caller must not fall back to
        an empty document when a remote one actually exists.
        """
        file_id = await self._binding.resolve()
        if file_id is None:
            self._data = new_document()
            logger.info("No remote document, starting from defaults")
            return self._data

        raw = await self._binding.read()
        try:
            loaded = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise MigrationDataError(f"Remote document is not valid JSON: {e}") from e
        if not isinstance(loaded, dict):
            raise MigrationDataError(
                f"Remote document root is {type(loaded).__name__}, expected an object"
            )

        self._data = migrate(loaded)
        logger.info(
            "Loaded document %s (version=%s, %d days)",
            file_id,
            self._data["version"],
            len(self._data.get("days") or {}),
        )
        return self._data

    def serialize(self) -> bytes:
        """Serialize the whole current document."""
        return json.dumps(self._doc, ensure_ascii=False, indent=2).encode("utf-8")

    async def persist(self) -> str:
        """Write the full document back and return the remote id."""
        return await self._binding.write(self.serialize())

    # ── Accessors ────────────────────────────────────────────

    def get_day(self, day: str | date) -> dict[str, Any]:
        """Return the live Day Record for ``day``, creating or back-filling it."""
        key = _date_key(day)
        days = self._doc.get("days")
        if not isinstance(days, dict):
            days = self._doc["days"] = {}

        record = days.get(key)
        if not isinstance(record, dict):
            if record is not None:
                logger.warning("Replacing malformed day record %s (%s)", key, type(record).__name__)
            record = days[key] = new_day()
            return record

        repair_day(record, f"days[{key}]")
        return record

    def get_settings(self) -> dict[str, Any]:
        return self._doc["settings"]

    def get_data(self) -> dict[str, Any]:
        return self._doc

    @staticmethod
    def today() -> str:
        """Current local calendar date as YYYY-MM-DD."""
        return date.today().strftime("%Y-%m-%d")
