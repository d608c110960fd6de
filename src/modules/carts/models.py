"""Cart and CartItem models.

A user has at most one ``abierto`` cart at a time (partial unique
constraint).  Checkout closes it; closed carts are kept, together with
their personalizations, for audit.
"""

from __future__ import annotations

from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models

from modules.carts.constants import CartStatus
from modules.core.models import BaseModel


class Cart(BaseModel):
    user_id: models.PositiveBigIntegerField = models.PositiveBigIntegerField(
        db_index=True
    )
    status: models.CharField = models.CharField(
        max_length=10,
        choices=CartStatus.choices,
        default=CartStatus.OPEN,
    )

    class Meta:
        db_table = "carts"
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["user_id"],
                condition=models.Q(status=CartStatus.OPEN),
                name="carts_single_open_per_user",
            ),
        ]

    @property
    def is_open(self) -> bool:
        return self.status == CartStatus.OPEN

    def __str__(self) -> str:
        return f"Cart {self.id} ({self.status})"


class CartItem(BaseModel):
    cart: models.ForeignKey = models.ForeignKey(
        "carts.Cart",
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

    class Meta:
        db_table = "cart_items"
        ordering = ["created_at", "id"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity__gte=1),
                name="cart_items_quantity_positive",
            ),
        ]

    @property
    def subtotal(self) -> Decimal:
        return self.quantity * self.unit_price

    def __str__(self) -> str:
        return f"product {self.product_id} x{self.quantity}"
