"""Order repositories package."""

from modules.orders.repositories.django_repository import (
    OperatorAssignmentDjangoRepository,
    OrderDjangoRepository,
)
from modules.orders.repositories.interfaces import (
    IOperatorAssignmentRepository,
    IOrderRepository,
)

__all__ = [
    "IOperatorAssignmentRepository",
    "IOrderRepository",
    "OperatorAssignmentDjangoRepository",
    "OrderDjangoRepository",
]
