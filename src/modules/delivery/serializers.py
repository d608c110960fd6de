"""Courier action request serializers."""

from __future__ import annotations

from rest_framework import serializers

from modules.orders.constants import CollectionMethod


class CoordinatesSerializer(serializers.Serializer):
    lat = serializers.DecimalField(
        max_digits=9, decimal_places=6, required=False, allow_null=True
    )
    lng = serializers.DecimalField(
        max_digits=9, decimal_places=6, required=False, allow_null=True
    )


class ConfirmReceivedSerializer(CoordinatesSerializer):
    """Without ``repartidorUsuarioId`` the requesting user is the courier."""

    repartidorUsuarioId = serializers.IntegerField(
        required=False, allow_null=True, min_value=1
    )


class ConfirmPaymentSerializer(serializers.Serializer):
    metodo = serializers.ChoiceField(choices=CollectionMethod.choices)
    referencia = serializers.CharField(
        required=False, default="", allow_blank=True, max_length=120
    )

    def to_internal_value(self, data):
        if isinstance(data, dict) and isinstance(data.get("metodo"), str):
            data = {**data, "metodo": data["metodo"].strip().lower()}
        return super().to_internal_value(data)


class FinishDeliverySerializer(CoordinatesSerializer):
    note = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class ReadyQueueQuerySerializer(serializers.Serializer):
    # values below 1 fall back to the default queue size
    limit = serializers.IntegerField(required=False)
    repartidorUsuarioId = serializers.IntegerField(required=False, min_value=1)
