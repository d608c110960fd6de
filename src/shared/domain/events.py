"""Domain event primitives shared by the order and delivery aggregates.

Events are frozen dataclasses.  Aggregates collect them while a use case
runs; the repository ``save`` drains them into the outbox in the same
transaction, and the relay worker rebuilds them with ``from_payload``.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from datetime import datetime, timezone
from typing import Any, Dict, List
from uuid import UUID, uuid4


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class DomainEvent:
    aggregate_id: UUID
    event_id: UUID = field(default_factory=uuid4)
    occurred_on: datetime = field(default_factory=_utcnow)
    event_name: str = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "event_name", type(self).__name__)

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> DomainEvent:
        """Rebuild an event from its outbox JSON payload.

        Keys the class does not declare are dropped, so rows written by an
        older release still relay after a field is removed.
        """
        init_names = {f.name for f in fields(cls) if f.init}
        data = {key: value for key, value in payload.items() if key in init_names}
        for name in ("aggregate_id", "event_id"):
            if name in data:
                data[name] = UUID(str(data[name]))
        if isinstance(data.get("occurred_on"), str):
            data["occurred_on"] = datetime.fromisoformat(data["occurred_on"])
        return cls(**data)


class DomainEventMixin:
    """Pending-event buffer for aggregate roots (Django models included)."""

    def _event_buffer(self) -> List[DomainEvent]:
        return self.__dict__.setdefault("_domain_events", [])

    def add_domain_event(self, event: DomainEvent) -> None:
        self._event_buffer().append(event)

    def clear_domain_events(self) -> None:
        self._event_buffer().clear()

    def pull_domain_events(self) -> List[DomainEvent]:
        """Return the pending events and empty the buffer."""
        buffer = self._event_buffer()
        events = list(buffer)
        buffer.clear()
        return events

    @property
    def domain_events(self) -> List[DomainEvent]:
        return list(self._event_buffer())
