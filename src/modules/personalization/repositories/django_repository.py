"""Django ORM implementation of the Personalization repository."""

from __future__ import annotations

from typing import List, Optional

import structlog
from django.db.models import Q, Value
from django.db.models.functions import Coalesce
from django.utils import timezone

from modules.orders.models import Order, OrderItem
from modules.personalization.constants import (
    COPIED_LAYER_FIELDS,
    FileOwnerKind,
    LayerKind,
)
from modules.personalization.models import (
    Layer,
    OrderImage,
    Personalization,
    StoredFile,
)
from modules.personalization.owners import Owner, owner_lookup
from modules.personalization.repositories.interfaces import IPersonalizationRepository

logger = structlog.get_logger(__name__)


class PersonalizationDjangoRepository(IPersonalizationRepository):
    def list_for_owner(self, owner: Owner) -> List[Personalization]:
        return list(
            Personalization.objects.owned_by(owner).order_by("side", "created_at")
        )

    def clone(self, source: Personalization, owner: Owner) -> Personalization:
        copy = Personalization.objects.create(
            side=source.side,
            capture=source.capture,
            **owner_lookup(owner),
        )
        layers = [
            Layer(
                personalization=copy,
                **{field: getattr(layer, field) for field in COPIED_LAYER_FIELDS},
            )
            for layer in source.layers.order_by("created_at", "id")
        ]
        Layer.objects.bulk_create(layers)
        logger.info(
            "personalization.copied",
            source_id=str(source.id),
            copy_id=str(copy.id),
            side=source.side,
            layer_count=len(layers),
        )
        return copy

    def set_item_sides(
        self,
        order_item: OrderItem,
        side_a: Optional[Personalization],
        side_b: Optional[Personalization],
    ) -> OrderItem:
        order_item.personalization_a = side_a
        order_item.personalization_b = side_b
        order_item.save(
            update_fields=["personalization_a", "personalization_b", "updated_at"]
        )
        return order_item

    def top_photo_file(self, personalization: Personalization) -> Optional[StoredFile]:
        layer = (
            Layer.objects.select_related("file")
            .filter(
                personalization=personalization,
                kind=LayerKind.PHOTO,
                file__isnull=False,
            )
            .order_by(Coalesce("z_index", Value(0)).desc(), "-created_at", "-id")
            .first()
        )
        return layer.file if layer else None

    def upsert_order_image(self, order: Order, file: StoredFile, side: str) -> OrderImage:
        image, _ = OrderImage.objects.update_or_create(
            order=order,
            side=side,
            defaults={"file": file},
        )
        return image

    def reparent_file(self, file: StoredFile, order: Order) -> bool:
        updated = (
            StoredFile.objects.filter(id=file.id)
            .filter(
                Q(owner_kind__isnull=True)
                | Q(owner_kind=FileOwnerKind.PERSONALIZATION)
            )
            .update(
                owner_kind=FileOwnerKind.ORDER,
                owner_id=str(order.id),
                updated_at=timezone.now(),
            )
        )
        return bool(updated)
