"""Django ORM implementation of the Order repositories.

Satisfies ``IOrderRepository`` and ``IOperatorAssignmentRepository``
using Django's QuerySet API.  Transaction boundaries belong to the
services; the only savepoint opened here guards folio insertion.

Concurrency control on state changes uses ``select_for_update()``
(``get_by_ref(..., for_update=True)``).
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional
from uuid import UUID

import structlog
from django.conf import settings
from django.contrib.contenttypes.models import ContentType
from django.db import IntegrityError, transaction
from django.db.models import QuerySet
from django.utils import timezone

from modules.core.outbox import flush_domain_events
from modules.orders.constants import OUTBOX_TOPIC
from modules.orders.exceptions import FolioCollision
from modules.orders.models import (
    Address,
    HistoryEntry,
    OperatorAssignment,
    Order,
    OrderItem,
    Payment,
)
from modules.orders.repositories.interfaces import (
    IOperatorAssignmentRepository,
    IOrderRepository,
    OrderRef,
)
from modules.workflow.models import Process, State, Transition

logger = structlog.get_logger(__name__)


def _as_uuid(ref: OrderRef) -> Optional[UUID]:
    if isinstance(ref, UUID):
        return ref
    try:
        return UUID(str(ref))
    except ValueError:
        return None


class OrderDjangoRepository(IOrderRepository):
    """Concrete Order repository backed by Django ORM."""

    outbox_topic = OUTBOX_TOPIC

    def _base_queryset(self) -> QuerySet:
        return Order.objects.select_related("process", "current_state", "address")

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get_by_ref(self, ref: OrderRef, for_update: bool = False) -> Optional[Order]:
        """Look up by UUID when ``ref`` parses as one, else by folio.

        The lock is restricted to the order row itself: the joined
        address is nullable and cannot be locked on every backend.
        """
        queryset = self._base_queryset()
        if for_update:
            queryset = queryset.select_for_update(of=("self",))
        order_id = _as_uuid(ref)
        if order_id is not None:
            return queryset.filter(id=order_id).first()
        return queryset.filter(folio=str(ref).strip()).first()

    def list_history(self, order: Order) -> List[HistoryEntry]:
        return list(
            order.history.select_related("state", "transition").order_by(
                "-created_at", "-id"
            )
        )

    def for_user(self, user_id: int) -> QuerySet:
        return (
            self._base_queryset()
            .prefetch_related("items")
            .filter(user_id=user_id)
            .order_by("-created_at", "-id")
        )

    def in_state(
        self,
        state: Optional[State],
        limit: int,
        operator_user_id: Optional[int] = None,
        courier_user_id: Optional[int] = None,
        assigned_only: bool = False,
    ) -> List[Order]:
        queryset = self._base_queryset()
        if state is not None:
            queryset = queryset.filter(current_state=state)
        if assigned_only:
            queryset = queryset.filter(operator_assignment__isnull=False)
        if operator_user_id is not None:
            queryset = queryset.filter(
                operator_assignment__operator_user_id=operator_user_id
            )
        if courier_user_id is not None:
            queryset = queryset.filter(delivery__courier_user_id=courier_user_id)
        return list(
            queryset.prefetch_related("items").order_by("created_at", "id")[:limit]
        )

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    def create_address(self, user_id: int, data: Dict[str, Any]) -> Address:
        address = Address.objects.create(user_id=user_id, **data)
        logger.info("order.address_created", address_id=str(address.id), user_id=user_id)
        return address

    def create_order(
        self,
        *,
        user_id: int,
        process: Process,
        state: State,
        total: Decimal,
        payment_method: str,
        address: Optional[Address] = None,
    ) -> Order:
        """Check-then-insert folio allocation with bounded retries.

        The insert runs in a savepoint so a candidate that loses a race
        against the unique constraint is retried instead of aborting the
        surrounding checkout.
        """
        retries = settings.FOLIO_MAX_RETRIES
        for attempt in range(1, retries + 1):
            candidate = Order.generate_folio()
            if Order.objects.filter(folio=candidate).exists():
                logger.warning("order.folio_taken", folio=candidate, attempt=attempt)
                continue
            order = Order(
                user_id=user_id,
                folio=candidate,
                total=total,
                process=process,
                current_state=state,
                payment_method=payment_method,
                address=address,
                area_id=address.area_id if address else None,
            )
            try:
                with transaction.atomic():
                    order.save(force_insert=True)
            except IntegrityError:
                logger.warning("order.folio_race_lost", folio=candidate, attempt=attempt)
                continue
            logger.info(
                "order.created",
                order_id=str(order.id),
                folio=order.folio,
                user_id=user_id,
                state=state.code,
            )
            return order

        logger.error("order.folio_exhausted", retries=retries, user_id=user_id)
        raise FolioCollision(
            f"Failed to generate a unique folio after {retries} attempts."
        )

    def create_item(
        self, order: Order, product_id: int, quantity: int, unit_price: Decimal
    ) -> OrderItem:
        item = OrderItem(
            order=order,
            product_id=product_id,
            quantity=quantity,
            unit_price=unit_price,
        )
        item.save()
        return item

    def append_history(
        self,
        order: Order,
        transition: Transition,
        state: State,
        user_id: Optional[int],
        notes: str,
    ) -> HistoryEntry:
        entry = HistoryEntry.objects.create(
            subject_type=ContentType.objects.get_for_model(Order),
            subject_id=order.id,
            transition=transition,
            state=state,
            user_id=user_id,
            notes=notes,
        )
        logger.info(
            "order.history_added",
            order_id=str(order.id),
            transition=transition.code,
            state=state.code,
        )
        return entry

    def record_payment(
        self,
        order: Order,
        *,
        method: str,
        status: str,
        amount: Decimal,
        reference: str = "",
        paid_at: Optional[datetime] = None,
    ) -> Payment:
        payment = Payment.objects.create(
            order=order,
            method=method,
            provider_reference=reference,
            status=status,
            amount=amount,
            paid_at=paid_at,
        )
        order.payment_status = status
        order.save(update_fields=["payment_status", "updated_at"])
        logger.info(
            "payment.recorded",
            order_id=str(order.id),
            method=method,
            status=status,
        )
        return payment

    def save(self, entity: Order) -> Order:
        """Persist the order and write its pending domain events to the outbox."""
        entity.save()
        rows = flush_domain_events(entity, topic=self.outbox_topic)
        logger.info("order.saved", order_id=str(entity.id), event_count=len(rows))
        return entity


class OperatorAssignmentDjangoRepository(IOperatorAssignmentRepository):
    def upsert(self, order: Order, operator_user_id: int) -> OperatorAssignment:
        assignment, created = OperatorAssignment.objects.update_or_create(
            order=order,
            defaults={
                "operator_user_id": operator_user_id,
                "assigned_at": timezone.now(),
            },
        )
        logger.info(
            "order.operator_assigned",
            order_id=str(order.id),
            operator_user_id=operator_user_id,
            created=created,
        )
        return assignment

    def delete(self, order: Order) -> bool:
        deleted, _ = OperatorAssignment.objects.filter(order=order).delete()
        if deleted:
            logger.info("order.operator_unassigned", order_id=str(order.id))
        return bool(deleted)

    def for_orders(self, order_ids: Iterable[UUID]) -> List[OperatorAssignment]:
        return list(
            OperatorAssignment.objects.filter(order_id__in=list(order_ids)).order_by(
                "order_id"
            )
        )
