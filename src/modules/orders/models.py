"""Order aggregate models.

Business rules implemented:
- An Order is created by checkout in the Process's initial State and is
  only ever moved by the Transition Executor; it is never deleted.
- ``folio`` is a human-readable identifier ``YYYYMMDD-NNNN`` allocated by
  the repository with bounded retries, backed by a unique constraint.
- OrderItem snapshots the cart line price (``unit_price``); ``subtotal``
  is always ``quantity * unit_price`` (calculated on save).
- HistoryEntry is an append-only audit row keyed by a generic
  (content type, uuid) subject.
- User identities belong to the external user service and are stored as
  plain integer ids.
"""

from __future__ import annotations

import secrets
from decimal import Decimal
from typing import Any

from django.contrib.contenttypes.fields import GenericForeignKey, GenericRelation
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone

from modules.core.models import BaseModel
from modules.orders.constants import (
    QR_PREFIX,
    CheckoutPaymentMethod,
    CollectionMethod,
    PaymentStatus,
)
from shared.domain.events import DomainEventMixin


class Address(BaseModel):
    """Delivery address captured at checkout."""

    user_id: models.PositiveBigIntegerField = models.PositiveBigIntegerField(
        db_index=True
    )
    area_id: models.PositiveBigIntegerField = models.PositiveBigIntegerField(
        null=True, blank=True
    )
    delivery_point_id: models.PositiveBigIntegerField = (
        models.PositiveBigIntegerField(null=True, blank=True)
    )
    description: models.TextField = models.TextField(blank=True, default="")
    contact_name: models.CharField = models.CharField(
        max_length=150, blank=True, default=""
    )
    phone: models.CharField = models.CharField(max_length=30, blank=True, default="")

    class Meta:
        db_table = "order_addresses"
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return self.description or f"Address {self.id}"


class Order(DomainEventMixin, BaseModel):
    """Order aggregate root and workflow subject.

    ``id`` (UUIDv7) is used for internal references; clients address
    orders by ``folio`` on the customer and courier endpoints.
    """

    user_id: models.PositiveBigIntegerField = models.PositiveBigIntegerField(
        db_index=True
    )
    folio: models.CharField = models.CharField(
        max_length=20, unique=True, editable=False
    )
    total: models.DecimalField = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal("0.00"),
    )
    process: models.ForeignKey = models.ForeignKey(
        "workflow.Process",
        on_delete=models.PROTECT,
        related_name="orders",
    )
    current_state: models.ForeignKey = models.ForeignKey(
        "workflow.State",
        on_delete=models.PROTECT,
        related_name="orders",
    )
    payment_method: models.CharField = models.CharField(
        max_length=20,
        choices=CheckoutPaymentMethod.choices,
    )
    payment_status: models.CharField = models.CharField(
        max_length=20,
        choices=PaymentStatus.choices,
        default=PaymentStatus.PENDING,
    )
    address: models.ForeignKey = models.ForeignKey(
        "orders.Address",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="orders",
    )
    area_id: models.PositiveBigIntegerField = models.PositiveBigIntegerField(
        null=True, blank=True
    )
    qr_text: models.CharField = models.CharField(max_length=40, blank=True, default="")

    history = GenericRelation(
        "orders.HistoryEntry",
        content_type_field="subject_type",
        object_id_field="subject_id",
    )

    class Meta:
        db_table = "orders"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["user_id", "-created_at"], name="orders_user_created_idx"),
            models.Index(fields=["current_state"], name="orders_state_idx"),
        ]

    @staticmethod
    def generate_folio() -> str:
        """Folio candidate: UTC date stamp plus a 4-digit random suffix."""
        now = timezone.now()
        suffix = 1000 + secrets.randbelow(9000)
        return f"{now:%Y%m%d}-{suffix}"

    def save(self, *args: Any, **kwargs: Any) -> None:
        if self.folio and not self.qr_text:
            self.qr_text = f"{QR_PREFIX}{self.folio}"
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return self.folio


class OrderItem(BaseModel):
    order: models.ForeignKey = models.ForeignKey(
        "orders.Order",
        on_delete=models.CASCADE,
        related_name="items",
    )
    product_id: models.PositiveBigIntegerField = models.PositiveBigIntegerField()
    quantity: models.PositiveIntegerField = models.PositiveIntegerField(
        default=1,
        validators=[MinValueValidator(1)],
    )
    unit_price: models.DecimalField = models.DecimalField(
        max_digits=10,
        decimal_places=2,
    )
    subtotal: models.DecimalField = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        editable=False,
    )
    personalization_a: models.ForeignKey = models.ForeignKey(
        "personalization.Personalization",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    personalization_b: models.ForeignKey = models.ForeignKey(
        "personalization.Personalization",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )

    class Meta:
        db_table = "order_items"
        ordering = ["created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity__gte=1),
                name="order_items_quantity_positive",
            ),
        ]

    def save(self, *args: Any, **kwargs: Any) -> None:
        self.subtotal = self.quantity * self.unit_price
        update_fields = kwargs.get("update_fields")
        if update_fields is not None and "subtotal" not in update_fields:
            if {"quantity", "unit_price"} & set(update_fields):
                kwargs["update_fields"] = list(update_fields) + ["subtotal"]
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return f"product {self.product_id} x{self.quantity} (${self.subtotal})"


class HistoryEntry(BaseModel):
    """Append-only audit trail of transitions applied to a workflow subject.

    ``user_id`` is nullable: ``None`` means the move was made by the system
    or by a courier action with no identified user.
    """

    subject_type: models.ForeignKey = models.ForeignKey(
        "contenttypes.ContentType",
        on_delete=models.PROTECT,
    )
    subject_id: models.UUIDField = models.UUIDField()
    subject = GenericForeignKey("subject_type", "subject_id")
    transition: models.ForeignKey = models.ForeignKey(
        "workflow.Transition",
        on_delete=models.PROTECT,
        related_name="history_entries",
    )
    state: models.ForeignKey = models.ForeignKey(
        "workflow.State",
        on_delete=models.PROTECT,
        related_name="history_entries",
    )
    user_id: models.PositiveBigIntegerField = models.PositiveBigIntegerField(
        null=True, blank=True
    )
    notes: models.TextField = models.TextField(blank=True, default="")

    class Meta:
        db_table = "history_entries"
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(
                fields=["subject_type", "subject_id", "-created_at"],
                name="history_subject_created_idx",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.subject_id} -> {self.state_id}"


class Payment(BaseModel):
    """One payment attempt, self-reported by the courier."""

    order: models.ForeignKey = models.ForeignKey(
        "orders.Order",
        on_delete=models.PROTECT,
        related_name="payments",
    )
    method: models.CharField = models.CharField(
        max_length=20, choices=CollectionMethod.choices
    )
    provider_reference: models.CharField = models.CharField(
        max_length=120, blank=True, default=""
    )
    status: models.CharField = models.CharField(
        max_length=20, choices=PaymentStatus.choices
    )
    amount: models.DecimalField = models.DecimalField(max_digits=10, decimal_places=2)
    paid_at: models.DateTimeField = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = "payments"
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return f"{self.order_id} {self.method} {self.status}"


class OperatorAssignment(BaseModel):
    order: models.OneToOneField = models.OneToOneField(
        "orders.Order",
        on_delete=models.CASCADE,
        related_name="operator_assignment",
    )
    operator_user_id: models.PositiveBigIntegerField = models.PositiveBigIntegerField(
        db_index=True
    )
    assigned_at: models.DateTimeField = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = "operator_assignments"
        ordering = ["-assigned_at"]

    def __str__(self) -> str:
        return f"{self.order_id} -> {self.operator_user_id}"
