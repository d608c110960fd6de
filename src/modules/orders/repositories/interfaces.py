"""Order repository interfaces.

``IOrderRepository`` extends ``IAggregateRepository[Order]`` with what the
workflow needs: folio-allocating creation, reference look-up (folio or
id) with an optional row lock, history appends and payment rows.
``IOperatorAssignmentRepository`` covers the Order → operator mapping,
which is not part of the state machine.

The Service Layer depends exclusively on these contracts (DIP).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Optional, Union
from uuid import UUID

from modules.core.repositories.interfaces import IAggregateRepository

if TYPE_CHECKING:
    from django.db.models import QuerySet

    from modules.orders.models import (
        Address,
        HistoryEntry,
        OperatorAssignment,
        Order,
        OrderItem,
        Payment,
    )
    from modules.workflow.models import Process, State, Transition

OrderRef = Union[str, UUID]


class IOrderRepository(IAggregateRepository["Order"]):
    """Repository contract for the Order aggregate root."""

    @abstractmethod
    def get_by_ref(self, ref: OrderRef, for_update: bool = False) -> Optional[Order]:
        """Resolve an order by folio or UUID.

        With ``for_update`` the row is locked until the transaction ends.
        """

    @abstractmethod
    def create_address(self, user_id: int, data: Dict[str, Any]) -> Address:
        """Persist a delivery address captured at checkout."""

    @abstractmethod
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
        """Insert an order with a freshly allocated unique folio.

        Raises:
            FolioCollision: every candidate folio was taken.
        """

    @abstractmethod
    def create_item(
        self, order: Order, product_id: int, quantity: int, unit_price: Decimal
    ) -> OrderItem:
        """Insert one order line."""

    @abstractmethod
    def append_history(
        self,
        order: Order,
        transition: Transition,
        state: State,
        user_id: Optional[int],
        notes: str,
    ) -> HistoryEntry:
        """Append one audit row for ``order``."""

    @abstractmethod
    def list_history(self, order: Order) -> List[HistoryEntry]:
        """Audit rows of ``order``, newest first."""

    @abstractmethod
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
        """Insert a Payment row and mirror its status onto the order."""

    @abstractmethod
    def for_user(self, user_id: int) -> QuerySet:
        """Orders of a customer, newest first, with items prefetched."""

    @abstractmethod
    def in_state(
        self,
        state: Optional[State],
        limit: int,
        operator_user_id: Optional[int] = None,
        courier_user_id: Optional[int] = None,
        assigned_only: bool = False,
    ) -> List[Order]:
        """Oldest-first work queue of orders in ``state`` (any state if ``None``)."""


class IOperatorAssignmentRepository(ABC):
    @abstractmethod
    def upsert(self, order: Order, operator_user_id: int) -> OperatorAssignment:
        """Assign (or reassign) ``order`` to an operator."""

    @abstractmethod
    def delete(self, order: Order) -> bool:
        """Remove the assignment. Returns ``False`` if there was none."""

    @abstractmethod
    def for_orders(self, order_ids: Iterable[UUID]) -> List[OperatorAssignment]:
        """Assignments of the given orders (missing ones are skipped)."""
