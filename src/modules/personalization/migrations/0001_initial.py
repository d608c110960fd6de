import django.db.models.deletion
import uuid6
from django.db import migrations, models

SIDE_CHOICES = [("A", "Lado A"), ("B", "Lado B")]


def _base_fields():
    return [
        (
            "id",
            models.UUIDField(
                default=uuid6.uuid7, editable=False, primary_key=True, serialize=False
            ),
        ),
        ("created_at", models.DateTimeField(auto_now_add=True)),
        ("updated_at", models.DateTimeField(auto_now=True)),
    ]


def _decimal():
    return models.DecimalField(blank=True, decimal_places=4, max_digits=10, null=True)


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("carts", "0001_initial"),
        ("orders", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="StoredFile",
            fields=[
                *_base_fields(),
                ("path", models.CharField(max_length=500)),
                (
                    "owner_kind",
                    models.CharField(
                        blank=True,
                        choices=[
                            ("personalizacion", "Personalización"),
                            ("orden", "Orden"),
                        ],
                        max_length=20,
                        null=True,
                    ),
                ),
                ("owner_id", models.CharField(blank=True, max_length=64, null=True)),
            ],
            options={"db_table": "stored_files", "ordering": ["created_at"]},
        ),
        migrations.CreateModel(
            name="Personalization",
            fields=[
                *_base_fields(),
                ("side", models.CharField(choices=SIDE_CHOICES, max_length=1)),
                ("capture", models.TextField(blank=True, default="")),
                (
                    "cart_item",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="personalizations",
                        to="carts.cartitem",
                    ),
                ),
                (
                    "order_item",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="personalizations",
                        to="orders.orderitem",
                    ),
                ),
            ],
            options={
                "db_table": "personalizations",
                "ordering": ["side", "created_at"],
                "constraints": [
                    models.CheckConstraint(
                        condition=(
                            models.Q(cart_item__isnull=False, order_item__isnull=True)
                            | models.Q(cart_item__isnull=True, order_item__isnull=False)
                        ),
                        name="personalizations_single_owner",
                    ),
                    models.UniqueConstraint(
                        condition=models.Q(cart_item__isnull=False),
                        fields=("cart_item", "side"),
                        name="personalizations_cart_item_side_uniq",
                    ),
                    models.UniqueConstraint(
                        condition=models.Q(order_item__isnull=False),
                        fields=("order_item", "side"),
                        name="personalizations_order_item_side_uniq",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="Layer",
            fields=[
                *_base_fields(),
                (
                    "kind",
                    models.CharField(
                        choices=[
                            ("foto", "Foto"),
                            ("texto", "Texto"),
                            ("sticker", "Sticker"),
                            ("filtro", "Filtro"),
                        ],
                        max_length=10,
                    ),
                ),
                ("z_index", models.IntegerField(blank=True, null=True)),
                ("pos_x", _decimal()),
                ("pos_y", _decimal()),
                ("scale", _decimal()),
                ("rotation", _decimal()),
                ("text", models.TextField(blank=True, default="")),
                ("font", models.CharField(blank=True, default="", max_length=100)),
                ("color", models.CharField(blank=True, default="", max_length=20)),
                ("sticker_id", models.PositiveBigIntegerField(blank=True, null=True)),
                ("filter_id", models.PositiveBigIntegerField(blank=True, null=True)),
                ("data", models.JSONField(blank=True, null=True)),
                (
                    "file",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="layers",
                        to="personalization.storedfile",
                    ),
                ),
                (
                    "personalization",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="layers",
                        to="personalization.personalization",
                    ),
                ),
            ],
            options={
                "db_table": "personalization_layers",
                "ordering": ["z_index", "created_at"],
            },
        ),
        migrations.CreateModel(
            name="OrderImage",
            fields=[
                *_base_fields(),
                ("side", models.CharField(choices=SIDE_CHOICES, max_length=1)),
                (
                    "file",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="order_images",
                        to="personalization.storedfile",
                    ),
                ),
                (
                    "order",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="images",
                        to="orders.order",
                    ),
                ),
            ],
            options={
                "db_table": "order_images",
                "ordering": ["side"],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("order", "side"), name="order_images_order_side_uniq"
                    ),
                ],
            },
        ),
    ]
