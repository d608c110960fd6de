"""Order API views.

Thin adapters: validate the request with a serializer, build the
service with its Django repositories (DIP) and render the result.
Domain exceptions propagate to ``api_exception_handler``; views never
catch them.
"""

from __future__ import annotations

from rest_framework import status
from rest_framework.exceptions import ValidationError
from rest_framework.permissions import IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from modules.carts.repositories.django_repository import CartDjangoRepository
from modules.core.pagination import StandardResultsSetPagination
from modules.core.permissions import IsOperator, IsSupervisor
from modules.delivery.repositories.django_repository import DeliveryDjangoRepository
from modules.orders.dtos import CheckoutAddressDTO, CheckoutDTO, OrderSummaryDTO
from modules.orders.filters import OrderHistoryFilter
from modules.orders.operators import OperatorAssignmentService, OperatorDirectory
from modules.orders.repositories.django_repository import (
    OperatorAssignmentDjangoRepository,
    OrderDjangoRepository,
)
from modules.orders.serializers import (
    AdvanceSerializer,
    AssignmentQuerySerializer,
    AssignOperatorSerializer,
    CheckoutSerializer,
    EventSerializer,
    OrderHistorySerializer,
    QueueQuerySerializer,
    SetStateSerializer,
    UserQuerySerializer,
)
from modules.orders.services import (
    CheckoutService,
    OrderQueryService,
    TrackingAssembler,
    TransitionExecutor,
)
from modules.personalization.repositories.django_repository import (
    PersonalizationDjangoRepository,
)
from modules.personalization.services import PersonalizationCopier
from modules.workflow.constants import OrderStateCode
from modules.workflow.repositories.django_repository import WorkflowDjangoRepository
from modules.workflow.services import WorkflowDefinitionStore

OK = {"ok": True}


def build_executor() -> TransitionExecutor:
    return TransitionExecutor(
        order_repository=OrderDjangoRepository(),
        delivery_repository=DeliveryDjangoRepository(),
        workflow_store=WorkflowDefinitionStore(WorkflowDjangoRepository()),
    )


def build_query_service() -> OrderQueryService:
    return OrderQueryService(
        order_repository=OrderDjangoRepository(),
        workflow_store=WorkflowDefinitionStore(WorkflowDjangoRepository()),
    )


def render_queue(orders) -> Response:
    return Response(
        [
            OrderSummaryDTO.from_entity(order).model_dump(mode="json", by_alias=True)
            for order in orders
        ]
    )


# ---------------------------------------------------------------------------
# Customer
# ---------------------------------------------------------------------------


class CheckoutView(APIView):
    """POST /api/v1/checkout"""

    throttle_scope = "checkout"

    def post(self, request: Request) -> Response:
        serializer = CheckoutSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        address = data.get("direccion")
        dto = CheckoutDTO(
            user_id=data["usuarioId"],
            payment_method=data["metodoPago"],
            address=(
                CheckoutAddressDTO(
                    area_id=address.get("areaId"),
                    delivery_point_id=address.get("puntoEntregaId"),
                    description=address.get("descripcion", ""),
                    contact_name=address.get("contactoNombre", ""),
                    phone=address.get("telefono", ""),
                )
                if address
                else None
            ),
            draft_item_id=data.get("draftItemId"),
        )

        service = CheckoutService(
            cart_repository=CartDjangoRepository(),
            order_repository=OrderDjangoRepository(),
            delivery_repository=DeliveryDjangoRepository(),
            workflow_store=WorkflowDefinitionStore(WorkflowDjangoRepository()),
            personalization_copier=PersonalizationCopier(
                PersonalizationDjangoRepository()
            ),
        )
        result = service.checkout(dto)
        return Response(
            result.model_dump(mode="json", by_alias=True),
            status=status.HTTP_201_CREATED,
        )


class TrackingView(APIView):
    """GET /api/v1/orders/{folio}/tracking"""

    def get(self, request: Request, folio: str) -> Response:
        assembler = TrackingAssembler(
            order_repository=OrderDjangoRepository(),
            delivery_repository=DeliveryDjangoRepository(),
            workflow_store=WorkflowDefinitionStore(WorkflowDjangoRepository()),
        )
        tracking = assembler.assemble(folio)
        return Response(tracking.model_dump(mode="json", by_alias=True))


class OrderHistoryView(APIView):
    """GET /api/v1/orders/history?usuarioId=&page=&pageSize="""

    def get(self, request: Request) -> Response:
        query = UserQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        queryset = build_query_service().history_for_user(
            query.validated_data["usuarioId"]
        )
        filterset = OrderHistoryFilter(request.query_params, queryset=queryset)
        if not filterset.is_valid():
            raise ValidationError(filterset.errors)
        paginator = StandardResultsSetPagination()
        page = paginator.paginate_queryset(filterset.qs, request, view=self)
        serializer = OrderHistorySerializer(page, many=True)
        return paginator.get_paginated_response(serializer.data)


# ---------------------------------------------------------------------------
# Staff: state changes
# ---------------------------------------------------------------------------


class SetStateView(APIView):
    """POST /api/v1/orders/{folio}/set-state"""

    permission_classes = [IsAuthenticated, IsOperator]

    def post(self, request: Request, folio: str) -> Response:
        serializer = SetStateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        build_executor().apply(
            folio,
            serializer.validated_data["code"],
            note=serializer.validated_data.get("note"),
            acting_user_id=request.user.pk,
        )
        return Response(OK)


class OrderEventView(APIView):
    """POST /api/v1/orders/{folio}/events"""

    permission_classes = [IsAuthenticated, IsOperator]

    def post(self, request: Request, folio: str) -> Response:
        serializer = EventSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        build_executor().add_event(
            folio,
            note=serializer.validated_data.get("note"),
            acting_user_id=request.user.pk,
        )
        return Response(OK)


class OperatorAdvanceView(APIView):
    """POST /api/v1/operator/orders/{order_id}/advance"""

    permission_classes = [IsAuthenticated, IsOperator]

    def post(self, request: Request, order_id: str) -> Response:
        serializer = AdvanceSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        build_executor().advance(
            order_id,
            serializer.validated_data["to"],
            note=serializer.validated_data.get("note"),
            acting_user_id=request.user.pk,
        )
        return Response(OK)


# ---------------------------------------------------------------------------
# Staff: work queues
# ---------------------------------------------------------------------------


class OperatorQueueView(APIView):
    """GET /api/v1/operator/orders?estado=CRE&limit=50"""

    permission_classes = [IsAuthenticated, IsOperator]

    def get(self, request: Request) -> Response:
        query = QueueQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        data = query.validated_data
        orders = build_query_service().queue(
            data.get("estado") or OrderStateCode.CREATED,
            limit=data.get("limit"),
        )
        return render_queue(orders)


class OperatorAssignedQueueView(APIView):
    """GET /api/v1/operator/orders-assigned?estado=&operadorUsuarioId=&limit="""

    permission_classes = [IsAuthenticated, IsOperator]

    def get(self, request: Request) -> Response:
        query = QueueQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        data = query.validated_data
        orders = build_query_service().queue(
            data.get("estado") or None,
            limit=data.get("limit"),
            operator_user_id=data.get("operadorUsuarioId"),
            assigned_only=True,
        )
        return render_queue(orders)


# ---------------------------------------------------------------------------
# Supervisor
# ---------------------------------------------------------------------------


class OperatorListView(APIView):
    """GET /api/v1/supervisor/operators"""

    permission_classes = [IsAuthenticated, IsSupervisor]

    def get(self, request: Request) -> Response:
        operators = OperatorDirectory().list_operators()
        return Response(
            [operator.model_dump(mode="json", by_alias=True) for operator in operators]
        )


class AssignOperatorView(APIView):
    """POST /api/v1/supervisor/orders/{order_id}/assign-operator"""

    permission_classes = [IsAuthenticated, IsSupervisor]

    def post(self, request: Request, order_id: str) -> Response:
        serializer = AssignOperatorSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        service = OperatorAssignmentService(
            order_repository=OrderDjangoRepository(),
            assignment_repository=OperatorAssignmentDjangoRepository(),
        )
        assignment = service.assign(
            order_id, serializer.validated_data["operadorUsuarioId"]
        )
        if assignment is None:
            return Response(status=status.HTTP_204_NO_CONTENT)
        return Response(assignment.model_dump(mode="json", by_alias=True))


class AssignmentListView(APIView):
    """GET /api/v1/supervisor/orders/assignments?ids=<uuid>,<uuid>"""

    permission_classes = [IsAuthenticated, IsSupervisor]

    def get(self, request: Request) -> Response:
        query = AssignmentQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        service = OperatorAssignmentService(
            order_repository=OrderDjangoRepository(),
            assignment_repository=OperatorAssignmentDjangoRepository(),
        )
        assignments = service.assignments(query.validated_data["ids"])
        return Response(
            [item.model_dump(mode="json", by_alias=True) for item in assignments]
        )
