"""Bind the one logical document to exactly one object in the remote store."""

from __future__ import annotations

import asyncio
import enum
import logging
from typing import TYPE_CHECKING

from vita.errors import RemoteReadError

if TYPE_CHECKING:
    from vita.providers.base import RemoteStore

logger = logging.getLogger(__name__)


class BindingState(enum.Enum):
    UNRESOLVED = "unresolved"
    ABSENT = "absent"  # looked up, nothing there yet
    BOUND = "bound"


class RemoteFileBinding:
    """Find-or-create-once mapping from a well-known file name to a remote id.

    The id, once obtained from ``resolve()`` or a creating ``write()``, is
    kept for the rest of the session, so a second write never creates a
    second object. No retries happen here; callers own retry policy.
    """

    def __init__(self, remote: RemoteStore, name: str) -> None:
        self._remote = remote
        self.name = name
        self._state = BindingState.UNRESOLVED
        self._file_id: str | None = None
        self._write_lock = asyncio.Lock()

    @property
    def state(self) -> BindingState:
        return self._state

    @property
    def file_id(self) -> str | None:
        return self._file_id

    def _bind(self, file_id: str) -> None:
        self._file_id = file_id
        self._state = BindingState.BOUND

    async def resolve(self) -> str | None:
        """Look the document up by name. Never creates anything."""
        if self._state is BindingState.BOUND:
            return self._file_id
        file_id = await self._remote.find(self.name)
        if file_id:
            self._bind(file_id)
            logger.debug("Resolved %s → %s", self.name, file_id)
        else:
            self._state = BindingState.ABSENT
            logger.debug("No remote object named %s", self.name)
        return file_id or None

    async def read(self) -> bytes:
        """Fetch the full content of the bound object."""
        if self._state is not BindingState.BOUND:
            raise RemoteReadError(f"{self.name} is not bound to a remote object")
        return await self._remote.get(self._file_id)

    async def write(self, content: bytes) -> str:
        """Create the object on first write, otherwise overwrite it in place."""
        async with self._write_lock:
            if self._state is BindingState.UNRESOLVED:
                await self.resolve()

            if self._state is BindingState.BOUND:
                await self._remote.update(self._file_id, content)
                return self._file_id

            try:
                file_id = await self._remote.create(self.name, content)
            except Exception:
                # A failed create may still exist remotely; resolve again first
                self._state = BindingState.UNRESOLVED
                raise
            self._bind(file_id)
            logger.info("Created remote document %s (id=%s)", self.name, file_id)
            return file_id
