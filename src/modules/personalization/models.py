"""Personalization models.

- ``StoredFile``: metadata of an upload kept in the external file store.
- ``Personalization``: one side (A/B) of a product line, owned by exactly
  one cart item **or** one order item (check constraint).
- ``Layer``: ordered visual element of a personalization.
- ``OrderImage``: the image chosen for each side of an order.
"""

from __future__ import annotations

from django.db import models

from modules.core.models import BaseModel
from modules.personalization.constants import FileOwnerKind, LayerKind, Side
from modules.personalization.owners import (
    CartItemOwner,
    OrderItemOwner,
    Owner,
    owner_lookup,
)


class StoredFile(BaseModel):
    path: models.CharField = models.CharField(max_length=500)
    owner_kind: models.CharField = models.CharField(
        max_length=20,
        choices=FileOwnerKind.choices,
        null=True,
        blank=True,
    )
    owner_id: models.CharField = models.CharField(
        max_length=64, null=True, blank=True
    )

    class Meta:
        db_table = "stored_files"
        ordering = ["created_at"]

    def __str__(self) -> str:
        return self.path


class PersonalizationQuerySet(models.QuerySet):
    def owned_by(self, owner: Owner) -> PersonalizationQuerySet:
        return self.filter(**owner_lookup(owner))


class Personalization(BaseModel):
    cart_item: models.ForeignKey = models.ForeignKey(
        "carts.CartItem",
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="personalizations",
    )
    order_item: models.ForeignKey = models.ForeignKey(
        "orders.OrderItem",
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="personalizations",
    )
    side: models.CharField = models.CharField(max_length=1, choices=Side.choices)
    capture: models.TextField = models.TextField(blank=True, default="")

    objects = PersonalizationQuerySet.as_manager()

    class Meta:
        db_table = "personalizations"
        ordering = ["side", "created_at"]
        constraints = [
            models.CheckConstraint(
                condition=(
                    models.Q(cart_item__isnull=False, order_item__isnull=True)
                    | models.Q(cart_item__isnull=True, order_item__isnull=False)
                ),
                name="personalizations_single_owner",
            ),
            models.UniqueConstraint(
                fields=["cart_item", "side"],
                condition=models.Q(cart_item__isnull=False),
                name="personalizations_cart_item_side_uniq",
            ),
            models.UniqueConstraint(
                fields=["order_item", "side"],
                condition=models.Q(order_item__isnull=False),
                name="personalizations_order_item_side_uniq",
            ),
        ]

    @property
    def owner(self) -> Owner:
        if self.cart_item_id is not None:
            return CartItemOwner(self.cart_item_id)
        return OrderItemOwner(self.order_item_id)

    def __str__(self) -> str:
        return f"{self.owner} side {self.side}"


class Layer(BaseModel):
    personalization: models.ForeignKey = models.ForeignKey(
        "personalization.Personalization",
        on_delete=models.CASCADE,
        related_name="layers",
    )
    kind: models.CharField = models.CharField(max_length=10, choices=LayerKind.choices)
    z_index: models.IntegerField = models.IntegerField(null=True, blank=True)
    pos_x: models.DecimalField = models.DecimalField(
        max_digits=10, decimal_places=4, null=True, blank=True
    )
    pos_y: models.DecimalField = models.DecimalField(
        max_digits=10, decimal_places=4, null=True, blank=True
    )
    scale: models.DecimalField = models.DecimalField(
        max_digits=10, decimal_places=4, null=True, blank=True
    )
    rotation: models.DecimalField = models.DecimalField(
        max_digits=10, decimal_places=4, null=True, blank=True
    )
    text: models.TextField = models.TextField(blank=True, default="")
    font: models.CharField = models.CharField(max_length=100, blank=True, default="")
    color: models.CharField = models.CharField(max_length=20, blank=True, default="")
    file: models.ForeignKey = models.ForeignKey(
        "personalization.StoredFile",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="layers",
    )
    sticker_id: models.PositiveBigIntegerField = models.PositiveBigIntegerField(
        null=True, blank=True
    )
    filter_id: models.PositiveBigIntegerField = models.PositiveBigIntegerField(
        null=True, blank=True
    )
    data: models.JSONField = models.JSONField(null=True, blank=True)

    class Meta:
        db_table = "personalization_layers"
        ordering = ["z_index", "created_at"]

    def __str__(self) -> str:
        return f"{self.kind} z={self.z_index}"


class OrderImage(BaseModel):
    order: models.ForeignKey = models.ForeignKey(
        "orders.Order",
        on_delete=models.CASCADE,
        related_name="images",
    )
    file: models.ForeignKey = models.ForeignKey(
        "personalization.StoredFile",
        on_delete=models.PROTECT,
        related_name="order_images",
    )
    side: models.CharField = models.CharField(max_length=1, choices=Side.choices)

    class Meta:
        db_table = "order_images"
        ordering = ["side"]
        constraints = [
            models.UniqueConstraint(
                fields=["order", "side"],
                name="order_images_order_side_uniq",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.order_id} {self.side}: {self.file_id}"
