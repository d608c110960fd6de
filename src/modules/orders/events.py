"""Domain events for the Orders bounded context.

Extra fields carry defaults so ``DomainEvent.from_payload`` can rebuild
events from older outbox rows.
"""

from __future__ import annotations

from dataclasses import dataclass

from shared.domain.events import DomainEvent


@dataclass(frozen=True)
class OrderCreated(DomainEvent):
    """Raised once per order produced by checkout."""

    folio: str = ""
    user_id: int = 0


@dataclass(frozen=True)
class OrderStateChanged(DomainEvent):
    """Raised on every applied transition, reflexive ones included."""

    folio: str = ""
    from_state: str = ""
    to_state: str = ""


@dataclass(frozen=True)
class PaymentRecorded(DomainEvent):
    folio: str = ""
    method: str = ""
    status: str = ""
