from django.db import models


class Side(models.TextChoices):
    A = "A", "Lado A"
    B = "B", "Lado B"


class LayerKind(models.TextChoices):
    PHOTO = "foto", "Foto"
    TEXT = "texto", "Texto"
    STICKER = "sticker", "Sticker"
    FILTER = "filtro", "Filtro"


class FileOwnerKind(models.TextChoices):
    PERSONALIZATION = "personalizacion", "Personalización"
    ORDER = "orden", "Orden"


# Layer columns duplicated verbatim when a personalization is copied.
COPIED_LAYER_FIELDS = (
    "kind",
    "z_index",
    "pos_x",
    "pos_y",
    "scale",
    "rotation",
    "text",
    "font",
    "color",
    "file_id",
    "sticker_id",
    "filter_id",
    "data",
)
