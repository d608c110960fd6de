import decimal

import django.core.validators
import django.db.models.deletion
import django.utils.timezone
import uuid6
from django.db import migrations, models

PAYMENT_STATUS_CHOICES = [
    ("pendiente", "Pendiente"),
    ("pagado", "Pagado"),
    ("autorizado", "Autorizado"),
]


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


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("contenttypes", "0002_remove_content_type_name"),
        ("workflow", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Address",
            fields=[
                *_base_fields(),
                ("user_id", models.PositiveBigIntegerField(db_index=True)),
                ("area_id", models.PositiveBigIntegerField(blank=True, null=True)),
                (
                    "delivery_point_id",
                    models.PositiveBigIntegerField(blank=True, null=True),
                ),
                ("description", models.TextField(blank=True, default="")),
                (
                    "contact_name",
                    models.CharField(blank=True, default="", max_length=150),
                ),
                ("phone", models.CharField(blank=True, default="", max_length=30)),
            ],
            options={"db_table": "order_addresses", "ordering": ["-created_at"]},
        ),
        migrations.CreateModel(
            name="Order",
            fields=[
                *_base_fields(),
                ("user_id", models.PositiveBigIntegerField(db_index=True)),
                (
                    "folio",
                    models.CharField(editable=False, max_length=20, unique=True),
                ),
                (
                    "total",
                    models.DecimalField(
                        decimal_places=2, default=decimal.Decimal("0.00"), max_digits=10
                    ),
                ),
                (
                    "payment_method",
                    models.CharField(
                        choices=[("efectivo", "Efectivo"), ("tarjeta", "Tarjeta")],
                        max_length=20,
                    ),
                ),
                (
                    "payment_status",
                    models.CharField(
                        choices=PAYMENT_STATUS_CHOICES,
                        default="pendiente",
                        max_length=20,
                    ),
                ),
                ("area_id", models.PositiveBigIntegerField(blank=True, null=True)),
                ("qr_text", models.CharField(blank=True, default="", max_length=40)),
                (
                    "address",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="orders",
                        to="orders.address",
                    ),
                ),
                (
                    "current_state",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="orders",
                        to="workflow.state",
                    ),
                ),
                (
                    "process",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="orders",
                        to="workflow.process",
                    ),
                ),
            ],
            options={
                "db_table": "orders",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(
                        fields=["user_id", "-created_at"],
                        name="orders_user_created_idx",
                    ),
                    models.Index(fields=["current_state"], name="orders_state_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="OrderItem",
            fields=[
                *_base_fields(),
                ("product_id", models.PositiveBigIntegerField()),
                (
                    "quantity",
                    models.PositiveIntegerField(
                        default=1,
                        validators=[django.core.validators.MinValueValidator(1)],
                    ),
                ),
                ("unit_price", models.DecimalField(decimal_places=2, max_digits=10)),
                (
                    "subtotal",
                    models.DecimalField(
                        decimal_places=2, editable=False, max_digits=10
                    ),
                ),
                (
                    "order",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="items",
                        to="orders.order",
                    ),
                ),
            ],
            options={
                "db_table": "order_items",
                "ordering": ["created_at"],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(quantity__gte=1),
                        name="order_items_quantity_positive",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="HistoryEntry",
            fields=[
                *_base_fields(),
                ("subject_id", models.UUIDField()),
                ("user_id", models.PositiveBigIntegerField(blank=True, null=True)),
                ("notes", models.TextField(blank=True, default="")),
                (
                    "subject_type",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        to="contenttypes.contenttype",
                    ),
                ),
                (
                    "state",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="history_entries",
                        to="workflow.state",
                    ),
                ),
                (
                    "transition",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="history_entries",
                        to="workflow.transition",
                    ),
                ),
            ],
            options={
                "db_table": "history_entries",
                "ordering": ["-created_at", "-id"],
                "indexes": [
                    models.Index(
                        fields=["subject_type", "subject_id", "-created_at"],
                        name="history_subject_created_idx",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="Payment",
            fields=[
                *_base_fields(),
                (
                    "method",
                    models.CharField(
                        choices=[
                            ("cash", "Cash"),
                            ("transfer", "Transfer"),
                            ("card", "Card"),
                        ],
                        max_length=20,
                    ),
                ),
                (
                    "provider_reference",
                    models.CharField(blank=True, default="", max_length=120),
                ),
                (
                    "status",
                    models.CharField(choices=PAYMENT_STATUS_CHOICES, max_length=20),
                ),
                ("amount", models.DecimalField(decimal_places=2, max_digits=10)),
                ("paid_at", models.DateTimeField(blank=True, null=True)),
                (
                    "order",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="payments",
                        to="orders.order",
                    ),
                ),
            ],
            options={"db_table": "payments", "ordering": ["-created_at"]},
        ),
        migrations.CreateModel(
            name="OperatorAssignment",
            fields=[
                *_base_fields(),
                ("operator_user_id", models.PositiveBigIntegerField(db_index=True)),
                (
                    "assigned_at",
                    models.DateTimeField(default=django.utils.timezone.now),
                ),
                (
                    "order",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="operator_assignment",
                        to="orders.order",
                    ),
                ),
            ],
            options={"db_table": "operator_assignments", "ordering": ["-assigned_at"]},
        ),
    ]
