"""Event handlers for Delivery domain events."""

from __future__ import annotations

import structlog

from modules.delivery.events import DeliveryStatusChanged
from shared.domain.bus import IEventHandler

logger = structlog.get_logger(__name__)


class DeliveryStatusChangedHandler(IEventHandler[DeliveryStatusChanged]):
    def handle(self, event: DeliveryStatusChanged) -> None:
        logger.info(
            "delivery.event.status_changed",
            order_id=str(event.aggregate_id),
            folio=event.folio,
            from_status=event.from_status,
            to_status=event.to_status,
        )


delivery_status_changed_handler = DeliveryStatusChangedHandler()
