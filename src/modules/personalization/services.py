"""Personalization Copier.

Runs inside the checkout transaction.  For every side (A/B) personalized
on the source cart line, the personalization and its layers are copied
onto the new order line; the source stays attached to the closed cart.
The chosen photo of each side becomes the order's image for that side.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Dict, Optional
from uuid import UUID

import structlog

from modules.personalization.constants import Side
from modules.personalization.owners import CartItemOwner, OrderItemOwner

if TYPE_CHECKING:
    from modules.orders.models import OrderItem
    from modules.personalization.models import Personalization
    from modules.personalization.repositories.interfaces import (
        IPersonalizationRepository,
    )

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class CopiedSides:
    side_a: Optional[Personalization] = None
    side_b: Optional[Personalization] = None

    @property
    def is_empty(self) -> bool:
        return self.side_a is None and self.side_b is None


class PersonalizationCopier:
    def __init__(self, repository: IPersonalizationRepository) -> None:
        self._repo = repository

    def copy(
        self,
        source_cart_item_id: UUID,
        order_item: OrderItem,
        fallback_draft_item_id: Optional[UUID] = None,
    ) -> CopiedSides:
        """Copy cart-line personalizations onto ``order_item``.

        ``fallback_draft_item_id`` is consulted only when the cart line has
        no personalization (the "shop direct" flow personalizes a draft
        item instead).  Returns empty ``CopiedSides`` when neither has one;
        such orders get their image through a direct upload.
        """
        sources = self._repo.list_for_owner(CartItemOwner(source_cart_item_id))
        if not sources and fallback_draft_item_id is not None:
            sources = self._repo.list_for_owner(CartItemOwner(fallback_draft_item_id))
        if not sources:
            return CopiedSides()

        target = OrderItemOwner(order_item.id)
        copies: Dict[str, Personalization] = {}
        for source in sources:
            copied = self._repo.clone(source, target)
            copies.setdefault(copied.side.upper(), copied)

        sides = CopiedSides(side_a=copies.get(Side.A), side_b=copies.get(Side.B))
        self._repo.set_item_sides(order_item, sides.side_a, sides.side_b)

        order = order_item.order
        for side, personalization in ((Side.A, sides.side_a), (Side.B, sides.side_b)):
            if personalization is None:
                continue
            photo = self._repo.top_photo_file(personalization)
            if photo is None:
                continue
            self._repo.upsert_order_image(order, photo, side)
            self._repo.reparent_file(photo, order)
            logger.info(
                "order.image_linked",
                order_id=str(order.id),
                file_id=str(photo.id),
                side=side,
            )

        return sides
