"""Django ORM implementation of the Cart repository."""

from __future__ import annotations

from typing import List, Optional

import structlog

from modules.carts.constants import CartStatus
from modules.carts.models import Cart, CartItem
from modules.carts.repositories.interfaces import ICartRepository

logger = structlog.get_logger(__name__)


class CartDjangoRepository(ICartRepository):
    def get_open_cart(self, user_id: int, for_update: bool = False) -> Optional[Cart]:
        """Locking the cart row serializes two checkouts of the same cart."""
        queryset = Cart.objects.filter(user_id=user_id, status=CartStatus.OPEN)
        if for_update:
            queryset = queryset.select_for_update()
        return queryset.order_by("-created_at", "-id").first()

    def list_items(self, cart: Cart) -> List[CartItem]:
        return list(CartItem.objects.filter(cart=cart).order_by("created_at", "id"))

    def close(self, cart: Cart) -> Cart:
        cart.status = CartStatus.CLOSED
        cart.save(update_fields=["status", "updated_at"])
        logger.info("cart.closed", cart_id=str(cart.id), user_id=cart.user_id)
        return cart
