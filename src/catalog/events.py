"""
Catalog event dispatch.

Controllers publish `CatalogChanged` after a successful mutation. Admin
front-ends publish `EditRequested` and `DeleteRequested` for user intents.
Handlers may be plain functions or coroutines. A failing handler is logged
and does not affect the publisher or the other handlers.
"""

from __future__ import annotations

import inspect
import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import Any, Callable, DefaultDict, List, Optional, Type

from src.integrations.contracts.product_catalogues import EntryId

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CatalogEvent:
    pass


@dataclass(frozen=True)
class CatalogChanged(CatalogEvent):
    entity: str                 # "product" / "kit"
    action: str                 # "created" / "updated" / "deleted" / "media_removed"
    entry_id: Optional[EntryId] = None
    source: str = "remote"      # "remote" / "local"


@dataclass(frozen=True)
class EditRequested(CatalogEvent):
    entry_id: EntryId


@dataclass(frozen=True)
class DeleteRequested(CatalogEvent):
    entry_id: EntryId


Handler = Callable[[Any], Any]


class EventBus:
    def __init__(self) -> None:
        self._handlers: DefaultDict[Type[CatalogEvent], List[Handler]] = defaultdict(list)

    def subscribe(self, event_type: Type[CatalogEvent], handler: Handler) -> Callable[[], None]:
        """Register handler; returns a function that removes it again."""
        self._handlers[event_type].append(handler)

        def _unsubscribe() -> None:
            if handler in self._handlers[event_type]:
                self._handlers[event_type].remove(handler)

        return _unsubscribe

    async def publish(self, event: CatalogEvent) -> int:
        """Deliver event to every handler of its type (and base types). Returns handlers run."""
        delivered = 0
        for event_type in type(event).__mro__:
            for handler in list(self._handlers.get(event_type, ())):
                try:
                    outcome = handler(event)
                    if inspect.isawaitable(outcome):
                        await outcome
                    delivered += 1
                except Exception:
                    logger.exception("Event handler %r failed for %s", handler, event)
        return delivered
