"""Save coordinator: debounced, single-flight writes of the whole document.

Every feature section calls ``request_save()`` after mutating the document.
Requests are collapsed into at most one remote write at a time:

    idle ──request──▶ pending ──debounce elapsed──▶ in-flight ──done──▶ idle
                        ▲  │                          │
                        └──┘ request re-arms timer    └─ request sets dirty;
                                                         one more cycle runs
                                                         right after this one

Failures are reported to listeners as ``error`` and never retried here; the
next mutation re-arms the timer. ``status`` stays ``error`` until a later
write succeeds, while listeners still see every transition.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from vita.store.document import DocumentStore

logger = logging.getLogger(__name__)

SaveStatus = Literal["pending", "saving", "saved", "error"]
StatusListener = Callable[[SaveStatus], None]


class SaveCoordinator:
    """Turns many save requests into few, non-overlapping remote writes."""

    def __init__(self, store: DocumentStore, debounce: float = 1.0) -> None:
        self._store = store
        self._debounce = debounce
        self._timer: asyncio.TimerHandle | None = None
        self._task: asyncio.Task | None = None
        self._dirty = False
        self._listeners: list[StatusListener] = []
        self.status: SaveStatus | None = None
        self.last_error: Exception | None = None

    @property
    def state(self) -> Literal["idle", "pending", "in-flight"]:
        if self._task is not None:
            return "in-flight"
        if self._timer is not None:
            return "pending"
        return "idle"

    # ── Listeners ────────────────────────────────────────────

    def add_listener(self, listener: StatusListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: StatusListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify(self, status: SaveStatus) -> None:
        if not (self.status == "error" and status in ("pending", "saving")):
            self.status = status
        for listener in list(self._listeners):
            try:
                listener(status)
            except Exception as e:
                logger.warning("Save status listener failed: %s", e)

    # ── Requests ─────────────────────────────────────────────

    def request_save(self) -> None:
        """Schedule a write of the current document. Never blocks, never raises.

        Must be called from within the running event loop.
        """
        if self._task is not None:
            self._dirty = True
        else:
            if self._timer is not None:
                self._timer.cancel()
            loop = asyncio.get_running_loop()
            self._timer = loop.call_later(self._debounce, self._start_cycle)
        self._notify("pending")

    async def flush(self) -> None:
        """Write pending changes now and wait until nothing is in flight."""
        if self._timer is not None:
            self._timer.cancel()
            self._start_cycle()
        while self._task is not None:
            await self._task

    # ── Write cycles ─────────────────────────────────────────

    def _start_cycle(self) -> None:
        self._timer = None
        self._task = asyncio.get_running_loop().create_task(self._run())

    async def _run(self) -> None:
        try:
            while True:
                self._dirty = False
                await self._write_once()
                if not self._dirty:
                    break
                logger.debug("Document changed during write, saving again")
        finally:
            self._task = None

    async def _write_once(self) -> None:
        self._notify("saving")
        try:
            # persist() serializes synchronously before its first await,
            # so the content is the document as of this moment
            file_id = await self._store.persist()
        except Exception as e:
            self.last_error = e
            logger.error("Save failed: %s", e)
            self._notify("error")
        else:
            self.last_error = None
            logger.debug("Saved document (id=%s)", file_id)
            self._notify("saved")
