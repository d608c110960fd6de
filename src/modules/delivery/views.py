"""Courier API views.

All endpoints require the courier (or supervisor) role.  The requesting
user is recorded as the acting user of every audit entry.
"""

from __future__ import annotations

from rest_framework.permissions import IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from modules.core.permissions import IsCourier
from modules.delivery.repositories.django_repository import DeliveryDjangoRepository
from modules.delivery.serializers import (
    ConfirmPaymentSerializer,
    ConfirmReceivedSerializer,
    FinishDeliverySerializer,
    ReadyQueueQuerySerializer,
)
from modules.delivery.services import DeliveryWorkflow
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.views import OK, build_executor, build_query_service, render_queue
from modules.workflow.constants import OrderStateCode
from modules.workflow.repositories.django_repository import WorkflowDjangoRepository
from modules.workflow.services import WorkflowDefinitionStore


def build_workflow() -> DeliveryWorkflow:
    return DeliveryWorkflow(
        executor=build_executor(),
        order_repository=OrderDjangoRepository(),
        delivery_repository=DeliveryDjangoRepository(),
        workflow_store=WorkflowDefinitionStore(WorkflowDjangoRepository()),
    )


class CourierView(APIView):
    permission_classes = [IsAuthenticated, IsCourier]


class ConfirmReceivedView(CourierView):
    """POST /api/v1/repartidor/orders/{folio}/confirm-received"""

    def post(self, request: Request, folio: str) -> Response:
        serializer = ConfirmReceivedSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        build_workflow().confirm_received(
            folio,
            courier_user_id=data.get("repartidorUsuarioId") or request.user.pk,
            lat=data.get("lat"),
            lng=data.get("lng"),
        )
        return Response(OK)


class ConfirmPaymentView(CourierView):
    """POST /api/v1/repartidor/orders/{folio}/confirm-payment"""

    def post(self, request: Request, folio: str) -> Response:
        serializer = ConfirmPaymentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        payment = build_workflow().confirm_payment(
            folio,
            method=serializer.validated_data["metodo"],
            reference=serializer.validated_data["referencia"],
            courier_user_id=request.user.pk,
        )
        return Response({**OK, "estadoPago": payment.status})


class FinishDeliveryView(CourierView):
    """POST /api/v1/repartidor/orders/{folio}/finish-delivery"""

    def post(self, request: Request, folio: str) -> Response:
        serializer = FinishDeliverySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        build_workflow().finish_delivery(
            folio,
            note=data.get("note"),
            courier_user_id=request.user.pk,
            lat=data.get("lat"),
            lng=data.get("lng"),
        )
        return Response(OK)


class ReadyQueueView(CourierView):
    """GET /api/v1/repartidor/orders-ready?limit=&repartidorUsuarioId="""

    def get(self, request: Request) -> Response:
        query = ReadyQueueQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        orders = build_query_service().queue(
            OrderStateCode.READY,
            limit=query.validated_data.get("limit"),
            courier_user_id=query.validated_data.get("repartidorUsuarioId"),
        )
        return render_queue(orders)
