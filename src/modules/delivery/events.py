"""Domain events for the Delivery sub-workflow."""

from __future__ import annotations

from dataclasses import dataclass

from shared.domain.events import DomainEvent


@dataclass(frozen=True)
class DeliveryStatusChanged(DomainEvent):
    """Raised when the courier-side sub-state moves.

    ``aggregate_id`` is the order id so consumers can correlate with
    order events.
    """

    folio: str = ""
    from_status: str = ""
    to_status: str = ""
