from django.db import models


class DeliveryStatus(models.TextChoices):
    PENDING = "pendiente", "Pendiente"
    EN_ROUTE = "en_ruta", "En ruta"
    DELIVERED = "entregado", "Entregado"


OUTBOX_TOPIC = "delivery"
