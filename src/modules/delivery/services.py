"""Delivery sub-workflow (courier actions).

Each action is one transaction and goes through ``TransitionExecutor``
with an action-specific precondition, so the audit trail (HistoryEntry +
DeliveryEvent) is written by a single implementation:

- ``confirm_received``: order must be READY; Delivery → ``en_ruta``.
- ``confirm_payment``: records a Payment; cash is ``pagado`` at once and
  stamps the Delivery's cash collection, other methods are ``autorizado``.
- ``finish_delivery``: needs a DONE state and a declared READY → DONE
  edge in the Process; Delivery → ``entregado``; order → DONE.
"""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING, Optional

import structlog
from django.db import transaction
from django.utils import timezone

from modules.delivery.constants import DeliveryStatus
from modules.delivery.events import DeliveryStatusChanged
from modules.orders.constants import (
    PAYMENT_NOTE,
    RECEIVED_NOTE,
    CollectionMethod,
    PaymentStatus,
)
from modules.orders.events import PaymentRecorded
from modules.orders.exceptions import InvalidPaymentMethod
from modules.orders.services import require_state
from modules.workflow.constants import OrderStateCode, TransitionPolicy
from modules.workflow.exceptions import UndeclaredTransition

if TYPE_CHECKING:
    from modules.delivery.models import Delivery
    from modules.delivery.repositories.interfaces import IDeliveryRepository
    from modules.orders.models import Order, Payment
    from modules.orders.repositories.interfaces import IOrderRepository
    from modules.orders.services import TransitionExecutor, TransitionResult
    from modules.workflow.services import WorkflowDefinitionStore

logger = structlog.get_logger(__name__)


class DeliveryWorkflow:
    def __init__(
        self,
        executor: TransitionExecutor,
        order_repository: IOrderRepository,
        delivery_repository: IDeliveryRepository,
        workflow_store: WorkflowDefinitionStore,
    ) -> None:
        self._executor = executor
        self._order_repo = order_repository
        self._delivery_repo = delivery_repository
        self._store = workflow_store

    @transaction.atomic
    def confirm_received(
        self,
        folio: str,
        courier_user_id: Optional[int] = None,
        lat: Optional[Decimal] = None,
        lng: Optional[Decimal] = None,
    ) -> Delivery:
        """Courier picked the order up.

        Raises:
            OrderNotFound: unknown folio.
            InvalidStateForAction: the order is not READY; nothing is written.
        """
        result = self._executor.add_event(
            folio,
            note=RECEIVED_NOTE,
            acting_user_id=courier_user_id,
            precondition=require_state(OrderStateCode.READY),
            lat=lat,
            lng=lng,
        )
        delivery = result.delivery
        if courier_user_id is not None:
            delivery.courier_user_id = courier_user_id
        self._move(result.order, delivery, DeliveryStatus.EN_ROUTE)
        logger.info(
            "delivery.received",
            folio=folio,
            delivery_id=str(delivery.id),
            courier_user_id=courier_user_id,
        )
        return delivery

    @transaction.atomic
    def confirm_payment(
        self,
        folio: str,
        method: str,
        reference: str = "",
        courier_user_id: Optional[int] = None,
    ) -> Payment:
        """Record a self-reported payment for the order total.

        Raises:
            InvalidPaymentMethod: ``method`` is not cash, transfer or card.
            OrderNotFound: unknown folio.
        """
        method = (method or "").strip().lower()
        if method not in CollectionMethod.values:
            raise InvalidPaymentMethod(f"Payment method '{method}' is not supported.")

        result = self._executor.add_event(
            folio,
            note=PAYMENT_NOTE.format(method=method),
            acting_user_id=courier_user_id,
        )
        order = result.order
        is_cash = method == CollectionMethod.CASH
        now = timezone.now()
        status = PaymentStatus.PAID if is_cash else PaymentStatus.AUTHORIZED

        payment = self._order_repo.record_payment(
            order,
            method=method,
            status=status,
            amount=order.total,
            reference=reference,
            paid_at=now if is_cash else None,
        )
        order.add_domain_event(
            PaymentRecorded(
                aggregate_id=order.id,
                folio=order.folio,
                method=method,
                status=status,
            )
        )
        self._order_repo.save(order)

        if is_cash:
            delivery = result.delivery
            delivery.cash_collected_at = now
            self._delivery_repo.save(delivery)

        return payment

    @transaction.atomic
    def finish_delivery(
        self,
        folio: str,
        note: Optional[str] = None,
        courier_user_id: Optional[int] = None,
        lat: Optional[Decimal] = None,
        lng: Optional[Decimal] = None,
    ) -> TransitionResult:
        """Hand-off completed: order READY → DONE, Delivery ``entregado``.

        Raises:
            OrderNotFound: unknown folio.
            UndeclaredTransition: the Process lacks DONE or the READY → DONE edge.
            InvalidStateForAction: the order is not READY.
        """
        result = self._executor.apply(
            folio,
            OrderStateCode.DONE,
            note=note,
            acting_user_id=courier_user_id,
            precondition=self._can_finish,
            lat=lat,
            lng=lng,
            policy=TransitionPolicy.STRICT,
        )
        delivery = result.delivery
        delivery.delivered_at = timezone.now()
        self._move(result.order, delivery, DeliveryStatus.DELIVERED)
        logger.info("delivery.finished", folio=folio, delivery_id=str(delivery.id))
        return result

    def _can_finish(self, order: Order) -> None:
        process = order.process
        ready = self._store.resolve_state_by_code(process, OrderStateCode.READY)
        done = self._store.resolve_state_by_code(process, OrderStateCode.DONE)
        if ready is None or done is None:
            logger.error("delivery.done_state_missing", process=process.code)
            raise UndeclaredTransition(
                f"Process '{process.code}' must define "
                f"{OrderStateCode.READY} and {OrderStateCode.DONE}."
            )
        if self._store.resolve_transition(process, ready, done) is None:
            logger.error("delivery.finish_edge_missing", process=process.code)
            raise UndeclaredTransition(
                f"Process '{process.code}' does not declare "
                f"{OrderStateCode.READY} -> {OrderStateCode.DONE}."
            )
        require_state(OrderStateCode.READY)(order)

    def _move(self, order: Order, delivery: Delivery, status: str) -> None:
        previous = delivery.status
        delivery.status = status
        delivery.add_domain_event(
            DeliveryStatusChanged(
                aggregate_id=order.id,
                folio=order.folio,
                from_status=previous,
                to_status=status,
            )
        )
        self._delivery_repo.save(delivery)
