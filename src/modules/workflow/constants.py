"""Workflow domain constants.

The order lifecycle is data-driven (Process/State/Transition rows), but the
handful of state codes that application code reacts to are named here.
"""

from django.db import models


class StateKind(models.TextChoices):
    INITIAL = "I", "Inicial"
    NORMAL = "N", "Normal"
    TERMINAL = "T", "Terminal"


class TransitionPolicy(models.TextChoices):
    """How the executor treats a move with no declared edge."""

    PERMISSIVE = "permissive", "Synthesize missing edges"
    STRICT = "strict", "Reject undeclared edges"


class OrderStateCode(models.TextChoices):
    CREATED = "CRE", "Creada"
    PROCESSING = "PROC", "En proceso"
    READY = "READY", "Lista para entrega"
    DONE = "DONE", "Entregada"


SYNTHESIZED_TRANSITION_NAME = "Cambio de estado"


def transition_code(from_code: str, to_code: str) -> str:
    """Symbolic edge code, e.g. ``SET-CRE->PROC``."""
    return f"SET-{from_code}->{to_code}"
