"""Cart exceptions."""

from __future__ import annotations

from modules.core.exceptions import BusinessRuleViolation


class NoOpenCart(BusinessRuleViolation):
    code = "no_open_cart"
    default_message = "User has no open cart."


class EmptyCart(BusinessRuleViolation):
    code = "empty_cart"
    default_message = "The cart has no items."

