"""Shared fakes for document store tests."""

from __future__ import annotations

import asyncio
import json

import pytest

from vita.errors import RemoteReadError, RemoteWriteError
from vita.store.binding import RemoteFileBinding
from vita.store.document import DocumentStore

DOC_NAME = "health-tracker-data.json"


class FakeRemote:
    """In-memory RemoteStore that records every call.

    Set ``gate`` to an unset asyncio.Event to hold writes in flight, and
    ``fail_status`` to make writes fail with that status.
    """

    def __init__(self) -> None:
        self.files: dict[str, tuple[str, bytes]] = {}  # id → (name, content)
        self.calls: list[tuple[str, str]] = []
        self.writes: list[tuple[str, str, bytes]] = []  # (op, id/name, content)
        self.gate: asyncio.Event | None = None
        self.fail_status: int | None = None
        self.in_flight = 0
        self.max_in_flight = 0

    def seed(self, doc: dict | bytes, name: str = DOC_NAME) -> str:
        file_id = f"file-{len(self.files) + 1}"
        content = doc if isinstance(doc, bytes) else json.dumps(doc).encode("utf-8")
        self.files[file_id] = (name, content)
        return file_id

    @property
    def creates(self) -> list[tuple[str, str, bytes]]:
        return [w for w in self.writes if w[0] == "create"]

    @property
    def updates(self) -> list[tuple[str, str, bytes]]:
        return [w for w in self.writes if w[0] == "update"]

    def last_document(self) -> dict:
        return json.loads(self.writes[-1][2].decode("utf-8"))

    async def find(self, name: str) -> str | None:
        self.calls.append(("find", name))
        await asyncio.sleep(0)
        for file_id, (file_name, _) in self.files.items():
            if file_name == name:
                return file_id
        return None

    async def get(self, file_id: str) -> bytes:
        self.calls.append(("get", file_id))
        await asyncio.sleep(0)
        if file_id not in self.files:
            raise RemoteReadError(f"{file_id} not found", status=404)
        return self.files[file_id][1]

    async def _enter_write(self) -> None:
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.gate is not None:
                await self.gate.wait()
            await asyncio.sleep(0)
            if self.fail_status is not None:
                raise RemoteWriteError("write rejected", status=self.fail_status)
        finally:
            self.in_flight -= 1

    async def create(self, name: str, content: bytes) -> str:
        self.calls.append(("create", name))
        self.writes.append(("create", name, content))
        await self._enter_write()
        return self.seed(content, name)

    async def update(self, file_id: str, content: bytes) -> None:
        self.calls.append(("update", file_id))
        self.writes.append(("update", file_id, content))
        await self._enter_write()
        name, _ = self.files[file_id]
        self.files[file_id] = (name, content)


@pytest.fixture
def remote() -> FakeRemote:
    return FakeRemote()


@pytest.fixture
def binding(remote: FakeRemote) -> RemoteFileBinding:
    return RemoteFileBinding(remote, DOC_NAME)


@pytest.fixture
def store(binding: RemoteFileBinding) -> DocumentStore:
    return DocumentStore(binding)
