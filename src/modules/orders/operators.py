"""Operator directory and Order → operator assignment.

Assignments are not part of the state machine: assigning upserts the
mapping and unassigning deletes it.

``OperatorDirectory`` caches the operator listing through an injected
Django cache backend with a configurable TTL, so its lifetime is owned
by the cache, not by the worker process.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Iterable, List, Optional
from uuid import UUID

import structlog
from django.conf import settings
from django.contrib.auth import get_user_model
from django.core.cache import cache as default_cache
from django.db import transaction

from modules.orders.dtos import AssignmentDTO, OperatorDTO
from modules.orders.exceptions import OrderNotFound

if TYPE_CHECKING:
    from django.core.cache.backends.base import BaseCache

    from modules.orders.repositories.interfaces import (
        IOperatorAssignmentRepository,
        IOrderRepository,
    )

logger = structlog.get_logger(__name__)

OPERATORS_CACHE_KEY = "orders:operators"


def load_operators() -> List[OperatorDTO]:
    """Active users in the operator group, ordered by username."""
    User = get_user_model()
    users = (
        User.objects.filter(groups__name=settings.ROLE_OPERATOR, is_active=True)
        .distinct()
        .order_by("username")
    )
    return [
        OperatorDTO(
            user_id=user.pk,
            username=user.get_username(),
            name=user.get_full_name() or user.get_username(),
        )
        for user in users
    ]


class OperatorDirectory:
    def __init__(
        self,
        cache: Optional[BaseCache] = None,
        ttl: Optional[int] = None,
        loader: Callable[[], List[OperatorDTO]] = load_operators,
    ) -> None:
        self._cache = cache if cache is not None else default_cache
        self._ttl = ttl if ttl is not None else settings.OPERATOR_LIST_CACHE_TTL
        self._loader = loader

    def list_operators(self) -> List[OperatorDTO]:
        cached = self._cache.get(OPERATORS_CACHE_KEY)
        if cached is not None:
            return [OperatorDTO.model_validate(row) for row in cached]

        operators = self._loader()
        self._cache.set(
            OPERATORS_CACHE_KEY,
            [operator.model_dump() for operator in operators],
            self._ttl,
        )
        logger.info("operators.cache_filled", count=len(operators), ttl=self._ttl)
        return operators

    def invalidate(self) -> None:
        self._cache.delete(OPERATORS_CACHE_KEY)


class OperatorAssignmentService:
    def __init__(
        self,
        order_repository: IOrderRepository,
        assignment_repository: IOperatorAssignmentRepository,
    ) -> None:
        self._order_repo = order_repository
        self._assignment_repo = assignment_repository

    @transaction.atomic
    def assign(
        self, order_ref: str | UUID, operator_user_id: Optional[int]
    ) -> Optional[AssignmentDTO]:
        """Upsert the assignment, or delete it when ``operator_user_id`` is None.

        Raises:
            OrderNotFound: no order matches ``order_ref``.
        """
        order = self._order_repo.get_by_ref(order_ref, for_update=True)
        if order is None:
            raise OrderNotFound(f"Order {order_ref} not found.")

        if operator_user_id is None:
            self._assignment_repo.delete(order)
            return None
        assignment = self._assignment_repo.upsert(order, operator_user_id)
        return AssignmentDTO.from_entity(assignment)

    def assignments(self, order_ids: Iterable[UUID]) -> List[AssignmentDTO]:
        return [
            AssignmentDTO.from_entity(assignment)
            for assignment in self._assignment_repo.for_orders(order_ids)
        ]
