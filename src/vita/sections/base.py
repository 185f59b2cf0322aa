"""Base class for feature sections."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from vita.store.document import DocumentStore
    from vita.store.saver import SaveCoordinator


class Section:
    """A feature component with injected store and save coordinator handles.

    Sections mutate the live document through ``store`` and then call
    ``request_save()``. They never keep a second reference to the document.
    """

    name = "section"

    def __init__(self, store: DocumentStore, saver: SaveCoordinator) -> None:
        self.store = store
        self.saver = saver

    def request_save(self) -> None:
        self.saver.request_save()

    def _date(self, day: str | None) -> str:
        return day or self.store.today()
