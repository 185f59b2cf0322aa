"""Vita orchestrator: wires the document store for feature code.

Responsibilities:
1. Build the remote binding, document store and save coordinator once
2. Hand the same store/coordinator handles to every feature section
3. Load (and migrate) the document at start
4. Flush pending saves and release the remote store at stop
"""

from __future__ import annotations

import logging
from datetime import date
from typing import TYPE_CHECKING, Any

from vita.config import VitaConfig
from vita.pin import PinGate
from vita.store.binding import RemoteFileBinding
from vita.store.document import DocumentStore
from vita.store.saver import SaveCoordinator

if TYPE_CHECKING:
    from vita.providers.base import RemoteStore
    from vita.sections.base import Section

logger = logging.getLogger(__name__)


def build_remote(config: VitaConfig) -> RemoteStore:
    """Select the remote store backend named in the config."""
    if config.backend == "drive":
        from vita.providers.auth import StaticTokenSource
        from vita.providers.drive import DriveStore

        return DriveStore(config.drive, StaticTokenSource(config.drive.access_token))
    if config.backend == "local":
        from vita.providers.local import LocalFileStore

        return LocalFileStore(config.local_dir)
    raise ValueError(f"Unknown backend: {config.backend}")


class Vita:
    """Owns the single store + coordinator pair shared by all sections."""

    def __init__(self, config: VitaConfig, remote: RemoteStore) -> None:
        self.config = config
        self.remote = remote
        self.binding = RemoteFileBinding(remote, config.drive.file_name)
        self.store = DocumentStore(self.binding)
        self.saver = SaveCoordinator(self.store, debounce=config.save.debounce)
        self.pin = PinGate(self.store, self.saver, config.pin.salt, config.pin.length)
        self._sections: dict[str, Section] = {}

    # ── Section management ───────────────────────────────────

    def add_section(self, section: Section) -> None:
        self._sections[section.name] = section
        logger.debug("Registered section: %s", section.name)

    def section(self, name: str) -> Section:
        section = self._sections.get(name)
        if not section:
            raise KeyError(f"Section '{name}' not registered. Available: {list(self._sections)}")
        return section

    # ── Collaborator surface ─────────────────────────────────

    def save(self) -> None:
        self.saver.request_save()

    def get_day(self, day: str | date) -> dict[str, Any]:
        return self.store.get_day(day)

    def get_settings(self) -> dict[str, Any]:
        return self.store.get_settings()

    def get_data(self) -> dict[str, Any]:
        return self.store.get_data()

    def today(self) -> str:
        return self.store.today()

    # ── Lifecycle ────────────────────────────────────────────

    async def start(self) -> dict[str, Any]:
        """Load the document. Failures propagate to the caller."""
        data = await self.store.load()
        logger.info(
            "Vita ready (backend=%s, sections=%s)", self.config.backend, list(self._sections)
        )
        return data

    async def stop(self) -> None:
        """Flush pending saves and close the remote store if it supports it."""
        if self.store.loaded:
            await self.saver.flush()
        close = getattr(self.remote, "close", None)
        if close and callable(close):
            await close()
