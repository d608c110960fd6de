"""Order DRF serializers for API input/output.

Input serializers use the storefront's wire names (``usuarioId``,
``metodoPago``...) and run before any service call, so malformed
requests never open a transaction.  Business logic lives in the Service
Layer, which receives Pydantic DTOs from ``dtos.py``.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.orders.models import Order, OrderItem

# ---------------------------------------------------------------------------
# Input Serializers
# ---------------------------------------------------------------------------


class AddressSerializer(serializers.Serializer):
    areaId = serializers.IntegerField(required=False, allow_null=True, min_value=1)
    puntoEntregaId = serializers.IntegerField(
        required=False, allow_null=True, min_value=1
    )
    descripcion = serializers.CharField(required=False, default="", allow_blank=True)
    contactoNombre = serializers.CharField(
        required=False, default="", allow_blank=True, max_length=150
    )
    telefono = serializers.CharField(
        required=False, default="", allow_blank=True, max_length=30
    )


class CheckoutSerializer(serializers.Serializer):
    """``metodoPago`` is a free string; the service reports unknown methods."""

    usuarioId = serializers.IntegerField(min_value=1)
    metodoPago = serializers.CharField(max_length=20)
    direccion = AddressSerializer(required=False, allow_null=True)
    draftItemId = serializers.UUIDField(required=False, allow_null=True)


class EventSerializer(serializers.Serializer):
    """``notas`` is accepted as a synonym of ``note``."""

    note = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    notas = serializers.CharField(
        required=False, allow_blank=True, allow_null=True, write_only=True
    )

    def validate(self, attrs: dict) -> dict:
        notas = attrs.pop("notas", None)
        if not attrs.get("note"):
            attrs["note"] = notas
        return attrs


class SetStateSerializer(EventSerializer):
    """``codigo`` is accepted as a synonym of ``code``; one is required."""

    code = serializers.CharField(required=False, allow_blank=True, max_length=20)
    codigo = serializers.CharField(
        required=False, allow_blank=True, max_length=20, write_only=True
    )

    def validate(self, attrs: dict) -> dict:
        attrs = super().validate(attrs)
        codigo = attrs.pop("codigo", None)
        code = attrs.get("code") or codigo or ""
        if not code.strip():
            raise serializers.ValidationError({"code": ["code or codigo is required."]})
        attrs["code"] = code.strip()
        return attrs


class AdvanceSerializer(serializers.Serializer):
    to = serializers.CharField(max_length=20)
    note = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class AssignOperatorSerializer(serializers.Serializer):
    """``operadorUsuarioId`` is required but may be null (unassign)."""

    operadorUsuarioId = serializers.IntegerField(allow_null=True, min_value=1)


class UserQuerySerializer(serializers.Serializer):
    usuarioId = serializers.IntegerField(min_value=1)


class QueueQuerySerializer(serializers.Serializer):
    estado = serializers.CharField(required=False, allow_blank=True, max_length=20)
    # values below 1 fall back to the default queue size
    limit = serializers.IntegerField(required=False)
    operadorUsuarioId = serializers.IntegerField(required=False, min_value=1)


class AssignmentQuerySerializer(serializers.Serializer):
    ids = serializers.CharField()

    def validate_ids(self, value: str) -> list:
        field = serializers.UUIDField()
        parts = [part.strip() for part in value.split(",")]
        return [field.to_internal_value(part) for part in parts if part]


# ---------------------------------------------------------------------------
# Output Serializers (Read)
# ---------------------------------------------------------------------------


class OrderItemSerializer(serializers.ModelSerializer):
    productoId = serializers.IntegerField(source="product_id", read_only=True)
    cantidad = serializers.IntegerField(source="quantity", read_only=True)
    precioUnitario = serializers.DecimalField(
        source="unit_price", max_digits=10, decimal_places=2, read_only=True
    )

    class Meta:
        model = OrderItem
        fields = ["id", "productoId", "cantidad", "precioUnitario", "subtotal"]
        read_only_fields = fields


class OrderHistorySerializer(serializers.ModelSerializer):
    """Customer order history row with nested items."""

    estado = serializers.CharField(source="current_state.code", read_only=True)
    estadoNombre = serializers.CharField(source="current_state.name", read_only=True)
    metodoPago = serializers.CharField(source="payment_method", read_only=True)
    estadoPago = serializers.CharField(source="payment_status", read_only=True)
    creadoEn = serializers.DateTimeField(source="created_at", read_only=True)
    items = OrderItemSerializer(many=True, read_only=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "folio",
            "total",
            "estado",
            "estadoNombre",
            "metodoPago",
            "estadoPago",
            "creadoEn",
            "items",
        ]
        read_only_fields = fields
