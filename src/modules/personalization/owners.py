"""Personalization ownership as a tagged union.

A Personalization belongs either to a cart line (while the customer is
shopping) or to an order line (after checkout).  Callers pass one of the
two owner types; ``owner_lookup`` turns it into the matching ORM filter.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Union
from uuid import UUID


@dataclass(frozen=True)
class CartItemOwner:
    id: UUID


@dataclass(frozen=True)
class OrderItemOwner:
    id: UUID


Owner = Union[CartItemOwner, OrderItemOwner]


def owner_lookup(owner: Owner) -> Dict[str, Any]:
    if isinstance(owner, CartItemOwner):
        return {"cart_item_id": owner.id}
    if isinstance(owner, OrderItemOwner):
        return {"order_item_id": owner.id}
    raise TypeError(f"Unsupported personalization owner: {owner!r}")
