"""Delivery and DeliveryEvent models.

- ``Delivery``: exactly one per Order (one-to-one), created lazily on
  first need in ``pendiente``; carries the courier-side sub-state.
- ``DeliveryEvent``: append-only (state, coordinates, timestamp) log
  feeding the customer tracking view.
"""

from __future__ import annotations

from django.db import models

from modules.core.models import BaseModel
from modules.delivery.constants import DeliveryStatus
from shared.domain.events import DomainEventMixin


class Delivery(DomainEventMixin, BaseModel):
    order: models.OneToOneField = models.OneToOneField(
        "orders.Order",
        on_delete=models.CASCADE,
        related_name="delivery",
    )
    courier_user_id: models.PositiveBigIntegerField = models.PositiveBigIntegerField(
        null=True, blank=True, db_index=True
    )
    status: models.CharField = models.CharField(
        max_length=20,
        choices=DeliveryStatus.choices,
        default=DeliveryStatus.PENDING,
    )
    cash_collected_at: models.DateTimeField = models.DateTimeField(
        null=True, blank=True
    )
    delivered_at: models.DateTimeField = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = "deliveries"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status"], name="deliveries_status_idx"),
        ]

    def __str__(self) -> str:
        return f"Delivery {self.order_id} ({self.status})"


class DeliveryEvent(BaseModel):
    delivery: models.ForeignKey = models.ForeignKey(
        "delivery.Delivery",
        on_delete=models.CASCADE,
        related_name="events",
    )
    state: models.ForeignKey = models.ForeignKey(
        "workflow.State",
        on_delete=models.PROTECT,
        related_name="delivery_events",
    )
    lat: models.DecimalField = models.DecimalField(
        max_digits=9, decimal_places=6, null=True, blank=True
    )
    lng: models.DecimalField = models.DecimalField(
        max_digits=9, decimal_places=6, null=True, blank=True
    )

    class Meta:
        db_table = "delivery_events"
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(
                fields=["delivery", "-created_at"],
                name="delivery_events_recent_idx",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.delivery_id} @ {self.state_id}"
