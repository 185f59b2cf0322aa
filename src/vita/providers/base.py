"""Remote store protocol and the auth collaborator boundary."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class RemoteStore(Protocol):
    """Protocol that all remote file stores must implement.

    Ids are opaque strings assigned by the store.
    """

    async def find(self, name: str) -> str | None:
        """Return the id of the first object named ``name``, or None."""
        ...

    async def get(self, file_id: str) -> bytes:
        """Return the full content of an object."""
        ...

    async def create(self, name: str, content: bytes) -> str:
        """Create a new object and return its id."""
        ...

    async def update(self, file_id: str, content: bytes) -> None:
        """Overwrite an existing object's content in place."""
        ...


@runtime_checkable
class TokenSource(Protocol):
    """Supplies bearer credentials. Acquisition and refresh happen elsewhere."""

    def get_token(self) -> str | None: ...
