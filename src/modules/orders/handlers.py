"""Event handlers for Orders domain events."""

from __future__ import annotations

import structlog

from modules.orders.events import OrderCreated, OrderStateChanged, PaymentRecorded
from shared.domain.bus import IEventHandler

logger = structlog.get_logger(__name__)


class OrderCreatedHandler(IEventHandler[OrderCreated]):
    def handle(self, event: OrderCreated) -> None:
        logger.info(
            "order.event.created",
            order_id=str(event.aggregate_id),
            folio=event.folio,
            user_id=event.user_id,
        )


class OrderStateChangedHandler(IEventHandler[OrderStateChanged]):
    def handle(self, event: OrderStateChanged) -> None:
        logger.info(
            "order.event.state_changed",
            order_id=str(event.aggregate_id),
            folio=event.folio,
            from_state=event.from_state,
            to_state=event.to_state,
        )


class PaymentRecordedHandler(IEventHandler[PaymentRecorded]):
    def handle(self, event: PaymentRecorded) -> None:
        logger.info(
            "order.event.payment_recorded",
            order_id=str(event.aggregate_id),
            folio=event.folio,
            method=event.method,
            status=event.status,
        )


order_created_handler = OrderCreatedHandler()
order_state_changed_handler = OrderStateChangedHandler()
payment_recorded_handler = PaymentRecordedHandler()
