from django.db import models


class CartStatus(models.TextChoices):
    OPEN = "abierto", "Abierto"
    CLOSED = "cerrado", "Cerrado"
