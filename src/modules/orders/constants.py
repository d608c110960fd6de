"""Order domain constants.

State codes live in ``modules.workflow.constants``; this module holds the
payment vocabulary and the default audit notes written by the executor.
"""

from django.db import models


class CheckoutPaymentMethod(models.TextChoices):
    """Method the customer picks at checkout."""

    CASH = "efectivo", "Efectivo"
    CARD = "tarjeta", "Tarjeta"


class CollectionMethod(models.TextChoices):
    """Method the courier reports when confirming payment."""

    CASH = "cash", "Cash"
    TRANSFER = "transfer", "Transfer"
    CARD = "card", "Card"


class PaymentStatus(models.TextChoices):
    PENDING = "pendiente", "Pendiente"
    PAID = "pagado", "Pagado"
    AUTHORIZED = "autorizado", "Autorizado"


ORDER_CREATED_NOTE = "Creación de orden"
MANUAL_EVENT_NOTE = "Evento manual"
PAYMENT_NOTE = "Pago confirmado ({method})"
RECEIVED_NOTE = "Pedido recibido por repartidor"

QR_PREFIX = "ORD-"
OUTBOX_TOPIC = "orders"

QUEUE_DEFAULT_LIMIT = 50
QUEUE_MAX_LIMIT = 200


def transition_note(state_code: str) -> str:
    return f"Cambio a {state_code}"
