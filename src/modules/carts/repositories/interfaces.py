"""Cart repository interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, List, Optional

if TYPE_CHECKING:
    from modules.carts.models import Cart, CartItem


class ICartRepository(ABC):
    @abstractmethod
    def get_open_cart(self, user_id: int, for_update: bool = False) -> Optional[Cart]:
        """Return the user's most recent ``abierto`` cart."""

    @abstractmethod
    def list_items(self, cart: Cart) -> List[CartItem]:
        """Cart lines in insertion order."""

    @abstractmethod
    def close(self, cart: Cart) -> Cart:
        """Mark the cart ``cerrado``."""
