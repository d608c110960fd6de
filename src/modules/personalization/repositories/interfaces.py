"""Personalization repository interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, List, Optional

if TYPE_CHECKING:
    from modules.orders.models import Order, OrderItem
    from modules.personalization.models import OrderImage, Personalization, StoredFile
    from modules.personalization.owners import Owner


class IPersonalizationRepository(ABC):
    @abstractmethod
    def list_for_owner(self, owner: Owner) -> List[Personalization]:
        """All personalizations (any side) attached to ``owner``."""

    @abstractmethod
    def clone(self, source: Personalization, owner: Owner) -> Personalization:
        """Copy the row and all its layers onto a new owner."""

    @abstractmethod
    def set_item_sides(
        self,
        order_item: OrderItem,
        side_a: Optional[Personalization],
        side_b: Optional[Personalization],
    ) -> OrderItem:
        """Point the order line's side references at the given rows."""

    @abstractmethod
    def top_photo_file(self, personalization: Personalization) -> Optional[StoredFile]:
        """File of the photo layer with the highest z-index, if any."""

    @abstractmethod
    def upsert_order_image(self, order: Order, file: StoredFile, side: str) -> OrderImage:
        """Create or replace the (order, side) image mapping."""

    @abstractmethod
    def reparent_file(self, file: StoredFile, order: Order) -> bool:
        """Move ownership of an unowned/personalization file to the order."""
