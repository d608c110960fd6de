"""Delivery repository interface."""

from __future__ import annotations

from abc import abstractmethod
from decimal import Decimal
from typing import TYPE_CHECKING, List, Optional

from modules.core.repositories.interfaces import IAggregateRepository

if TYPE_CHECKING:
    from modules.delivery.models import Delivery, DeliveryEvent
    from modules.orders.models import Order
    from modules.workflow.models import State


class IDeliveryRepository(IAggregateRepository["Delivery"]):
    @abstractmethod
    def get_for_order(self, order: Order) -> Optional[Delivery]:
        """The order's Delivery row, if one was ever created."""

    @abstractmethod
    def get_or_create_for_order(self, order: Order, for_update: bool = False) -> Delivery:
        """Return the Delivery, creating it in ``pendiente`` when absent."""

    @abstractmethod
    def add_event(
        self,
        delivery: Delivery,
        state: State,
        lat: Optional[Decimal] = None,
        lng: Optional[Decimal] = None,
    ) -> DeliveryEvent:
        """Append a tracking event for ``state``."""

    @abstractmethod
    def recent_events(self, delivery: Delivery, limit: int) -> List[DeliveryEvent]:
        """The ``limit`` newest events, newest first."""
