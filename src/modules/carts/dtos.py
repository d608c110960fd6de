"""Cart DTOs (Pydantic v2, immutable)."""

from __future__ import annotations

from decimal import Decimal
from typing import List
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class CartLineDTO(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: UUID
    product_id: int = Field(serialization_alias="productoId")
    quantity: int = Field(serialization_alias="cantidad")
    unit_price: Decimal = Field(serialization_alias="precioUnitario")
    subtotal: Decimal


class CartPreviewDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    items: List[CartLineDTO]
    total: Decimal
