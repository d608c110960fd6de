"""Cart API views."""

from __future__ import annotations

from rest_framework import serializers
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from modules.carts.repositories.django_repository import CartDjangoRepository
from modules.carts.services import CartService


class CartPreviewQuerySerializer(serializers.Serializer):
    usuarioId = serializers.IntegerField(min_value=1)


class CartPreviewView(APIView):
    """GET /api/v1/cart/preview?usuarioId=<id>"""

    def get(self, request: Request) -> Response:
        query = CartPreviewQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        service = CartService(cart_repository=CartDjangoRepository())
        preview = service.preview(query.validated_data["usuarioId"])
        return Response(preview.model_dump(mode="json", by_alias=True))
