"""Typed failures raised by the document store and its providers."""

from __future__ import annotations


class VitaError(Exception):
    """Base class for all Vita errors."""


class NotAuthenticatedError(VitaError):
    """No valid bearer token is available for the remote store."""


class RemoteError(VitaError):
    """A remote store call failed. ``status`` is the HTTP status when known."""

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class RemoteReadError(RemoteError):
    """The store was unreachable or the object was missing when expected."""


class RemoteWriteError(RemoteError):
    """A create or update was rejected (auth expired, quota, network)."""


class MigrationDataError(VitaError):
    """A record is structurally invalid in a way a migration cannot default."""
