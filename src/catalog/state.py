"""
Admin editor state.

Tracks which entry the admin form is editing. Listens for `EditRequested` to
enter edit mode and for `CatalogChanged` to leave it once the edited entry is
saved or deleted.
"""

from typing import Callable, List, Optional

from src.catalog.events import CatalogChanged, DeleteRequested, EditRequested, EventBus
from src.integrations.contracts.product_catalogues import EntryId


class EditorState:
    def __init__(self, events: Optional[EventBus] = None):
        self.editing_id: Optional[EntryId] = None
        self.pending_delete: Optional[EntryId] = None
        self._unsubscribers: List[Callable[[], None]] = []
        if events is not None:
            self.bind(events)

    @property
    def is_editing(self) -> bool:
        return self.editing_id is not None

    def bind(self, events: EventBus) -> None:
        self._unsubscribers.extend([
            events.subscribe(EditRequested, self._on_edit),
            events.subscribe(DeleteRequested, self._on_delete),
            events.subscribe(CatalogChanged, self._on_changed),
        ])

    def unbind(self) -> None:
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers = []

    def reset(self) -> None:
        self.editing_id = None
        self.pending_delete = None

    def _on_edit(self, event: EditRequested) -> None:
        self.editing_id = event.entry_id

    def _on_delete(self, event: DeleteRequested) -> None:
        self.pending_delete = event.entry_id

    def _on_changed(self, event: CatalogChanged) -> None:
        if event.entry_id is None:
            return
        if self.editing_id is not None and str(event.entry_id) == str(self.editing_id) and event.action in ("updated", "deleted"):
            self.editing_id = None
        if self.pending_delete is not None and str(event.entry_id) == str(self.pending_delete) and event.action == "deleted":
            self.pending_delete = None
