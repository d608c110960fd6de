"""Cart read service (pre-checkout preview)."""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING

from modules.carts.dtos import CartLineDTO, CartPreviewDTO

if TYPE_CHECKING:
    from modules.carts.repositories.interfaces import ICartRepository


class CartService:
    def __init__(self, cart_repository: ICartRepository) -> None:
        self._cart_repo = cart_repository

    def preview(self, user_id: int) -> CartPreviewDTO:
        """Lines and total of the open cart; empty when there is none."""
        cart = self._cart_repo.get_open_cart(user_id)
        if cart is None:
            return CartPreviewDTO(items=[], total=Decimal("0.00"))

        lines = [
            CartLineDTO(
                id=item.id,
                product_id=item.product_id,
                quantity=item.quantity,
                unit_price=item.unit_price,
                subtotal=item.subtotal,
            )
            for item in self._cart_repo.list_items(cart)
        ]
        total = sum((line.subtotal for line in lines), Decimal("0.00"))
        return CartPreviewDTO(items=lines, total=total)
