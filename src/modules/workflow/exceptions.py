"""Workflow definition exceptions."""

from __future__ import annotations

from rest_framework import status

from modules.core.exceptions import ConfigurationError, DomainError, ResourceNotFound


class MissingProcess(ConfigurationError):
    """No Process row exists for the configured code."""


class MissingInitialState(ConfigurationError):
    """The Process has no State flagged as initial (kind ``I``)."""


class UndeclaredTransition(ConfigurationError):
    """A transition the application depends on is absent from seed data."""


class UnknownState(ResourceNotFound):
    """The requested target state code does not exist in the Process."""

    status_code = status.HTTP_400_BAD_REQUEST
    code = "unknown_state"
    default_message = "Target state is invalid."


class InvalidTransition(DomainError):
    """The move has no declared edge and the policy forbids synthesizing one."""

    status_code = status.HTTP_409_CONFLICT
    code = "invalid_transition"
    default_message = "Transition is not allowed for this order."
