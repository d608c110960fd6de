"""Base domain exceptions and the DRF exception handler.

Every module raises subclasses of ``DomainError``.  Each class carries the
HTTP status and a stable ``code`` so the API layer can translate failures
without knowing the concrete exception.  ``api_exception_handler`` renders
all errors with the same shape::

    {"error": "<message>", "code": "<code>"}

DRF validation failures additionally carry ``details`` with the
per-field messages.
"""

from __future__ import annotations

from typing import Any, Optional

import structlog
from rest_framework import status
from rest_framework.exceptions import ValidationError as DRFValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = structlog.get_logger(__name__)


class DomainError(Exception):
    """Base class for business failures surfaced to API callers."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    code: str = "domain_error"
    default_message: str = "Request could not be processed."

    def __init__(self, message: Optional[str] = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class RequestValidationError(DomainError):
    """Malformed or missing input, rejected before any transaction opens."""

    code = "validation_error"
    default_message = "Invalid request."


class BusinessRuleViolation(DomainError):
    """A precondition of the requested operation is not met."""

    code = "business_rule_violation"


class ResourceNotFound(DomainError):
    """The order, state, or other target of the operation does not exist."""

    status_code = status.HTTP_404_NOT_FOUND
    code = "not_found"
    default_message = "Resource not found."


class InvalidStateForAction(DomainError):
    """The action is not permitted from the subject's current state."""

    status_code = status.HTTP_409_CONFLICT
    code = "invalid_state_for_action"


class ConflictError(DomainError):
    """The operation collided with concurrent data (e.g. folio exhaustion)."""

    status_code = status.HTTP_409_CONFLICT
    code = "conflict"


class ConfigurationError(DomainError):
    """Seed/configuration data is missing. Never a user fault."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "configuration_error"
    default_message = "Workflow configuration is incomplete."


def api_exception_handler(exc: Exception, context: dict[str, Any]) -> Optional[Response]:
    """DRF ``EXCEPTION_HANDLER`` producing the ``{"error": ...}`` shape."""
    if isinstance(exc, DomainError):
        log = logger.bind(code=exc.code, status_code=exc.status_code)
        if isinstance(exc, ConfigurationError):
            log.error("api.configuration_error", error=exc.message)
        else:
            log.info("api.domain_error", error=exc.message)
        return Response(
            {"error": exc.message, "code": exc.code},
            status=exc.status_code,
        )

    response = exception_handler(exc, context)
    if response is None:
        return None

    if isinstance(exc, DRFValidationError):
        response.data = {
            "error": "Invalid request.",
            "code": "validation_error",
            "details": response.data,
        }
        return response

    detail = response.data.get("detail") if isinstance(response.data, dict) else None
    code = getattr(detail, "code", None) or "error"
    response.data = {"error": str(detail or response.data), "code": code}
    return response
