"""In-process event bus.

Subscriptions are made in the ``ready()`` hook of each app, so the set of
relayable event types is known once Django is loaded.  Handlers run
synchronously inside the relay task.
"""

from __future__ import annotations

from collections import defaultdict
from typing import DefaultDict, Dict, List, Optional, Type

from shared.domain.bus import IEventBus, IEventHandler
from shared.domain.events import DomainEvent


class InMemoryEventBus(IEventBus):
    def __init__(self) -> None:
        self._handlers: DefaultDict[Type[DomainEvent], List[IEventHandler]] = (
            defaultdict(list)
        )
        self._by_name: Dict[str, Type[DomainEvent]] = {}

    def subscribe(self, event_class: Type[DomainEvent], handler: IEventHandler) -> None:
        # ready() may run more than once under the test runner
        if handler not in self._handlers[event_class]:
            self._handlers[event_class].append(handler)
        self._by_name[event_class.__name__] = event_class

    def publish(self, event: DomainEvent) -> None:
        for handler in self._handlers.get(type(event), ()):
            handler.handle(event)

    def event_class_for(self, event_name: str) -> Optional[Type[DomainEvent]]:
        return self._by_name.get(event_name)


event_bus = InMemoryEventBus()
