"""Order service layer (Use Cases).

- ``CheckoutService``: converts the user's open cart into one order per
  line, atomically.
- ``TransitionExecutor``: the single choke-point that moves an order
  between workflow states and writes the audit trail.  Courier actions
  reuse it through an injected ``precondition``.
- ``TrackingAssembler``: read-only customer snapshot of an order.
- ``OrderQueryService``: customer history and staff work queues.

Business rules enforced:
- Checkout is all lines or none: any failure rolls back every order and
  leaves the cart open.
- Folios are unique (bounded retries, then ``FolioCollision``).
- Every applied transition appends a HistoryEntry and a DeliveryEvent;
  re-applying the same state is recorded again, never suppressed.
- Under the permissive policy an undeclared edge is synthesized once and
  reused afterwards; under the strict policy it is rejected.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import TYPE_CHECKING, Callable, List, Optional

import structlog
from django.conf import settings
from django.db import transaction

from modules.carts.exceptions import EmptyCart, NoOpenCart
from modules.core.exceptions import RequestValidationError
from modules.orders.constants import (
    MANUAL_EVENT_NOTE,
    ORDER_CREATED_NOTE,
    QUEUE_DEFAULT_LIMIT,
    QUEUE_MAX_LIMIT,
    CheckoutPaymentMethod,
    transition_note,
)
from modules.orders.dtos import (
    CheckoutOrderDTO,
    CheckoutResultDTO,
    StateDTO,
    TrackingDeliveryDTO,
    TrackingDTO,
    TrackingEventDTO,
    TrackingOrderDTO,
)
from modules.orders.events import OrderCreated, OrderStateChanged
from modules.orders.exceptions import InvalidPaymentMethod, OrderNotFound, OrderNotInState
from modules.workflow.constants import OrderStateCode, TransitionPolicy
from modules.workflow.exceptions import UnknownState

if TYPE_CHECKING:
    from django.db.models import QuerySet

    from modules.carts.repositories.interfaces import ICartRepository
    from modules.delivery.models import Delivery, DeliveryEvent
    from modules.delivery.repositories.interfaces import IDeliveryRepository
    from modules.orders.dtos import CheckoutDTO
    from modules.orders.models import HistoryEntry, Order
    from modules.orders.repositories.interfaces import IOrderRepository, OrderRef
    from modules.personalization.services import PersonalizationCopier
    from modules.workflow.models import State, Transition
    from modules.workflow.services import WorkflowDefinitionStore

logger = structlog.get_logger(__name__)

Precondition = Callable[["Order"], None]

OPERATOR_ADVANCE_TARGETS = frozenset({OrderStateCode.PROCESSING, OrderStateCode.READY})


def require_state(code: str) -> Precondition:
    """Precondition that the order currently sits in state ``code``."""

    def check(order: Order) -> None:
        current = order.current_state.code
        if current.upper() != code.upper():
            raise OrderNotInState(
                f"Order {order.folio} is in state {current}; {code} is required."
            )

    return check


def clamp_limit(limit: Optional[int]) -> int:
    if not limit or limit < 1:
        return QUEUE_DEFAULT_LIMIT
    return min(limit, QUEUE_MAX_LIMIT)


# ---------------------------------------------------------------------------
# Checkout
# ---------------------------------------------------------------------------


class CheckoutService:
    """Application service for the checkout use-case.

    Receives repositories and collaborators via constructor injection.
    """

    def __init__(
        self,
        cart_repository: ICartRepository,
        order_repository: IOrderRepository,
        delivery_repository: IDeliveryRepository,
        workflow_store: WorkflowDefinitionStore,
        personalization_copier: PersonalizationCopier,
    ) -> None:
        self._cart_repo = cart_repository
        self._order_repo = order_repository
        self._delivery_repo = delivery_repository
        self._store = workflow_store
        self._copier = personalization_copier

    def checkout(self, dto: CheckoutDTO) -> CheckoutResultDTO:
        """Validate the request, then run the checkout transaction.

        Raises:
            InvalidPaymentMethod: before any database access.
            NoOpenCart / EmptyCart: preconditions.  An unknown
                ``draft_item_id`` is not an error; it just yields no fallback.
            MissingProcess / MissingInitialState: seed data incomplete.
            FolioCollision: folio retries exhausted.
        """
        if dto.payment_method not in CheckoutPaymentMethod.values:
            raise InvalidPaymentMethod(
                f"Payment method '{dto.payment_method}' is not supported."
            )
        return self._checkout(dto)

    @transaction.atomic
    def _checkout(self, dto: CheckoutDTO) -> CheckoutResultDTO:
        log = logger.bind(user_id=dto.user_id)
        log.info("checkout.started", payment_method=dto.payment_method)

        cart = self._cart_repo.get_open_cart(dto.user_id, for_update=True)
        if cart is None:
            raise NoOpenCart(f"User {dto.user_id} has no open cart.")
        lines = self._cart_repo.list_items(cart)
        if not lines:
            raise EmptyCart(f"Cart {cart.id} has no items.")

        address = None
        if dto.address is not None:
            address = self._order_repo.create_address(
                dto.user_id, dto.address.model_dump()
            )

        process = self._store.resolve_process()
        initial = self._store.resolve_initial_state(process)

        orders: List[CheckoutOrderDTO] = []
        for line in lines:
            order = self._order_repo.create_order(
                user_id=dto.user_id,
                process=process,
                state=initial,
                total=line.subtotal,
                payment_method=dto.payment_method,
                address=address,
            )
            order_item = self._order_repo.create_item(
                order,
                product_id=line.product_id,
                quantity=line.quantity,
                unit_price=line.unit_price,
            )
            self._copier.copy(line.id, order_item, dto.draft_item_id)
            delivery = self._delivery_repo.get_or_create_for_order(order)

            # the reflexive creation edge is always ensured, whatever the policy
            transition = self._store.ensure_transition(
                process, initial, initial, policy=TransitionPolicy.PERMISSIVE
            )
            self._order_repo.append_history(
                order,
                transition,
                initial,
                user_id=dto.user_id,
                notes=ORDER_CREATED_NOTE,
            )
            order.add_domain_event(
                OrderCreated(aggregate_id=order.id, folio=order.folio, user_id=dto.user_id)
            )
            self._order_repo.save(order)

            orders.append(
                CheckoutOrderDTO(
                    order_id=order.id,
                    folio=order.folio,
                    total=order.total,
                    delivery_id=delivery.id,
                )
            )

        self._cart_repo.close(cart)
        log.info("checkout.completed", order_count=len(orders))
        return CheckoutResultDTO(
            user_id=dto.user_id,
            items_processed=len(lines),
            orders=orders,
        )


# ---------------------------------------------------------------------------
# Transition Executor
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TransitionResult:
    order: Order
    transition: Transition
    history_entry: HistoryEntry
    delivery: Delivery
    delivery_event: DeliveryEvent


class TransitionExecutor:
    """Moves an order through its Process and audits every move.

    Steps, inside one transaction:

    1. Lock the order row; ``OrderNotFound`` if absent.
    2. Run the caller's ``precondition`` (before any write).
    3. Resolve the target State; ``UnknownState`` if absent.
    4. Ensure a Transition (from → to) exists, per the policy.
    5. Update the state pointer (outbox: ``OrderStateChanged``, from
       ``apply`` only; ``add_event`` never announces a state change).
    6. Ensure the Delivery row and append a DeliveryEvent.
    7. Append the HistoryEntry.
    """

    def __init__(
        self,
        order_repository: IOrderRepository,
        delivery_repository: IDeliveryRepository,
        workflow_store: WorkflowDefinitionStore,
    ) -> None:
        self._order_repo = order_repository
        self._delivery_repo = delivery_repository
        self._store = workflow_store

    @transaction.atomic
    def apply(
        self,
        ref: OrderRef,
        to_code: str,
        note: Optional[str] = None,
        acting_user_id: Optional[int] = None,
        precondition: Optional[Precondition] = None,
        lat: Optional[Decimal] = None,
        lng: Optional[Decimal] = None,
        policy: Optional[str] = None,
    ) -> TransitionResult:
        order = self._load_locked(ref)
        if precondition is not None:
            precondition(order)

        to_state = self._store.resolve_state_by_code(order.process, to_code)
        if to_state is None:
            logger.warning(
                "order.unknown_state", order_id=str(order.id), to_state=to_code
            )
            raise UnknownState(f"State '{to_code}' does not exist.")

        return self._record(
            order,
            to_state,
            note=note or transition_note(to_state.code),
            acting_user_id=acting_user_id,
            lat=lat,
            lng=lng,
            policy=policy,
            announce=True,
        )

    @transaction.atomic
    def add_event(
        self,
        ref: OrderRef,
        note: Optional[str] = None,
        acting_user_id: Optional[int] = None,
        precondition: Optional[Precondition] = None,
        lat: Optional[Decimal] = None,
        lng: Optional[Decimal] = None,
        policy: Optional[str] = None,
    ) -> TransitionResult:
        """Audit-only variant: reflexive transition on the current state.

        The state does not change, so no ``OrderStateChanged`` is emitted.
        """
        order = self._load_locked(ref)
        if precondition is not None:
            precondition(order)
        return self._record(
            order,
            order.current_state,
            note=note or MANUAL_EVENT_NOTE,
            acting_user_id=acting_user_id,
            lat=lat,
            lng=lng,
            policy=policy,
        )

    def advance(
        self,
        ref: OrderRef,
        to_code: str,
        note: Optional[str] = None,
        acting_user_id: Optional[int] = None,
    ) -> TransitionResult:
        """Operator variant: only PROC/READY, and only along declared edges."""
        if to_code.upper() not in OPERATOR_ADVANCE_TARGETS:
            raise RequestValidationError(
                f"Operators may only move orders to "
                f"{OrderStateCode.PROCESSING} or {OrderStateCode.READY}."
            )
        return self.apply(
            ref,
            to_code,
            note=note,
            acting_user_id=acting_user_id,
            policy=TransitionPolicy.STRICT,
        )

    def _load_locked(self, ref: OrderRef) -> Order:
        order = self._order_repo.get_by_ref(ref, for_update=True)
        if order is None:
            raise OrderNotFound(f"Order {ref} not found.")
        return order

    def _record(
        self,
        order: Order,
        to_state: State,
        *,
        note: str,
        acting_user_id: Optional[int],
        lat: Optional[Decimal],
        lng: Optional[Decimal],
        policy: Optional[str],
        announce: bool = False,
    ) -> TransitionResult:
        from_state = order.current_state
        log = logger.bind(
            order_id=str(order.id),
            folio=order.folio,
            from_state=from_state.code,
            to_state=to_state.code,
        )

        transition = self._store.ensure_transition(
            order.process, from_state, to_state, policy=policy
        )

        order.current_state = to_state
        if announce:
            order.add_domain_event(
                OrderStateChanged(
                    aggregate_id=order.id,
                    folio=order.folio,
                    from_state=from_state.code,
                    to_state=to_state.code,
                )
            )
        self._order_repo.save(order)

        delivery = self._delivery_repo.get_or_create_for_order(order)
        delivery_event = self._delivery_repo.add_event(delivery, to_state, lat=lat, lng=lng)
        entry = self._order_repo.append_history(
            order,
            transition,
            to_state,
            user_id=acting_user_id,
            notes=note,
        )

        log.info("order.transition_applied", transition=transition.code)
        return TransitionResult(
            order=order,
            transition=transition,
            history_entry=entry,
            delivery=delivery,
            delivery_event=delivery_event,
        )


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------


class TrackingAssembler:
    def __init__(
        self,
        order_repository: IOrderRepository,
        delivery_repository: IDeliveryRepository,
        workflow_store: WorkflowDefinitionStore,
    ) -> None:
        self._order_repo = order_repository
        self._delivery_repo = delivery_repository
        self._store = workflow_store

    def assemble(self, folio: str) -> TrackingDTO:
        """Order + state + delivery + newest events + public steps.

        Raises:
            OrderNotFound: no order has this folio.
        """
        order = self._order_repo.get_by_ref(folio)
        if order is None:
            raise OrderNotFound(f"Order {folio} not found.")

        delivery = self._delivery_repo.get_for_order(order)
        events = []
        if delivery is not None:
            events = self._delivery_repo.recent_events(
                delivery, settings.TRACKING_EVENT_LIMIT
            )

        return TrackingDTO(
            order=TrackingOrderDTO.from_entity(order),
            delivery=TrackingDeliveryDTO.from_entity(delivery) if delivery else None,
            events=[TrackingEventDTO.from_entity(event) for event in events],
            steps=[
                StateDTO.from_entity(state)
                for state in self._store.public_steps(order.process)
            ],
        )


class OrderQueryService:
    def __init__(
        self,
        order_repository: IOrderRepository,
        workflow_store: WorkflowDefinitionStore,
    ) -> None:
        self._order_repo = order_repository
        self._store = workflow_store

    def history_for_user(self, user_id: int) -> QuerySet:
        return self._order_repo.for_user(user_id)

    def queue(
        self,
        state_code: Optional[str],
        limit: Optional[int] = None,
        operator_user_id: Optional[int] = None,
        courier_user_id: Optional[int] = None,
        assigned_only: bool = False,
    ) -> List[Order]:
        """Work queue filtered by state code (``None`` means any state).

        Raises:
            UnknownState: ``state_code`` is not part of the order Process.
        """
        state = None
        if state_code:
            process = self._store.resolve_process()
            state = self._store.resolve_state_by_code(process, state_code)
            if state is None:
                raise UnknownState(f"State '{state_code}' does not exist.")
        return self._order_repo.in_state(
            state,
            clamp_limit(limit),
            operator_user_id=operator_user_id,
            courier_user_id=courier_user_id,
            assigned_only=assigned_only,
        )
