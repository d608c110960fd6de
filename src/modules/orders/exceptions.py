"""Order domain exceptions.

Raised by the Service Layer and rendered by
``modules.core.exceptions.api_exception_handler``; views never catch them.
"""

from __future__ import annotations

from modules.core.exceptions import (
    ConflictError,
    InvalidStateForAction,
    RequestValidationError,
    ResourceNotFound,
)


class OrderNotFound(ResourceNotFound):
    """No order matches the given folio or id."""

    code = "order_not_found"
    default_message = "Order not found."


class InvalidPaymentMethod(RequestValidationError):
    code = "invalid_payment_method"
    default_message = "Payment method is not supported."


class FolioCollision(ConflictError):
    """Every folio candidate was already taken."""

    code = "folio_collision"
    default_message = "Could not allocate a unique folio, please retry."


class OrderNotInState(InvalidStateForAction):
    """The order is not in the state the action requires."""

    code = "invalid_state_for_action"
