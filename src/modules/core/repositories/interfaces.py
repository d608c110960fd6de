"""Aggregate repository contract (Dependency Inversion Principle).

Orders and deliveries collect domain events while a use case runs; their
repositories persist the aggregate and the pending events together, so
``save`` is the only write every aggregate repository shares.  Look-ups
differ per aggregate (folio, order) and live in the sub-interfaces.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import ClassVar, Generic, TypeVar

T = TypeVar("T")


class IAggregateRepository(ABC, Generic[T]):
    """Persistence port of an aggregate root that emits domain events."""

    #: Outbox topic the aggregate's events are written under.
    outbox_topic: ClassVar[str]

    @abstractmethod
    def save(self, entity: T) -> T:
        """Persist ``entity`` and move its pending events to the outbox."""
