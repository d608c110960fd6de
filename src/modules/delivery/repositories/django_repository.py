"""Django ORM implementation of the Delivery repository."""

from __future__ import annotations

from decimal import Decimal
from typing import List, Optional

import structlog

from modules.core.outbox import flush_domain_events
from modules.delivery.constants import OUTBOX_TOPIC, DeliveryStatus
from modules.delivery.models import Delivery, DeliveryEvent
from modules.delivery.repositories.interfaces import IDeliveryRepository
from modules.orders.models import Order
from modules.workflow.models import State

logger = structlog.get_logger(__name__)


class DeliveryDjangoRepository(IDeliveryRepository):
    outbox_topic = OUTBOX_TOPIC

    def get_for_order(self, order: Order) -> Optional[Delivery]:
        return Delivery.objects.filter(order=order).first()

    def get_or_create_for_order(self, order: Order, for_update: bool = False) -> Delivery:
        queryset = Delivery.objects.all()
        if for_update:
            queryset = queryset.select_for_update()
        delivery, created = queryset.get_or_create(
            order=order,
            defaults={"status": DeliveryStatus.PENDING},
        )
        if created:
            logger.info(
                "delivery.created",
                order_id=str(order.id),
                delivery_id=str(delivery.id),
            )
        return delivery

    def save(self, delivery: Delivery) -> Delivery:
        delivery.save()
        flush_domain_events(delivery, topic=self.outbox_topic)
        return delivery

    def add_event(
        self,
        delivery: Delivery,
        state: State,
        lat: Optional[Decimal] = None,
        lng: Optional[Decimal] = None,
    ) -> DeliveryEvent:
        return DeliveryEvent.objects.create(
            delivery=delivery,
            state=state,
            lat=lat,
            lng=lng,
        )

    def recent_events(self, delivery: Delivery, limit: int) -> List[DeliveryEvent]:
        return list(
            DeliveryEvent.objects.select_related("state")
            .filter(delivery=delivery)
            .order_by("-created_at", "-id")[:limit]
        )
