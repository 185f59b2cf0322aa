"""Directory-backed remote store for offline use and development.

The object id is the file name, so ``find`` and ``create`` agree.
"""

from __future__ import annotations

import asyncio
import logging
import os
from pathlib import Path

from vita.errors import RemoteReadError, RemoteWriteError

logger = logging.getLogger(__name__)


class LocalFileStore:
    """RemoteStore over a local directory, with atomic replace on write."""

    def __init__(self, root: Path) -> None:
        self.root = root

    @property
    def name(self) -> str:
        return "local"

    def _path(self, file_id: str) -> Path:
        return self.root / file_id

    async def find(self, name: str) -> str | None:
        return name if self._path(name).is_file() else None

    async def get(self, file_id: str) -> bytes:
        try:
            return self._path(file_id).read_bytes()
        except OSError as e:
            raise RemoteReadError(f"Cannot read {file_id}: {e}") from e

    async def create(self, name: str, content: bytes) -> str:
        if self._path(name).exists():
            raise RemoteWriteError(f"{name} already exists", status=409)
        await self._write(name, content)
        return name

    async def update(self, file_id: str, content: bytes) -> None:
        if not self._path(file_id).exists():
            raise RemoteWriteError(f"{file_id} does not exist", status=404)
        await self._write(file_id, content)

    async def _write(self, file_id: str, content: bytes) -> None:
        path = self._path(file_id)
        tmp = path.with_suffix(path.suffix + ".tmp")
        try:
            self.root.mkdir(parents=True, exist_ok=True)
            tmp.write_bytes(content)
            os.replace(tmp, path)
        except OSError as e:
            raise RemoteWriteError(f"Cannot write {file_id}: {e}") from e
        # Yield so callers observe a suspension point like a network store
        await asyncio.sleep(0)
        logger.debug("Wrote %d bytes to %s", len(content), path)
