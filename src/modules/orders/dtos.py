"""Order DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.  DTOs are
immutable (``frozen=True``).  Output DTOs declare ``serialization_alias``
for the wire names used by the storefront clients; views render them with
``model_dump(mode="json", by_alias=True)``.

- ``CheckoutDTO`` / ``CheckoutAddressDTO``: checkout input.
- ``CheckoutResultDTO``: the orders produced by one checkout.
- ``TrackingDTO``: customer-facing order snapshot.
- ``OrderSummaryDTO``: row of the operator / courier work queues.
- ``AssignmentDTO`` / ``OperatorDTO``: supervisor views.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

if TYPE_CHECKING:
    from modules.delivery.models import Delivery, DeliveryEvent
    from modules.orders.models import OperatorAssignment, Order
    from modules.workflow.models import State


# ---------------------------------------------------------------------------
# Input DTOs
# ---------------------------------------------------------------------------


class CheckoutAddressDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    area_id: Optional[int] = None
    delivery_point_id: Optional[int] = None
    description: str = ""
    contact_name: str = ""
    phone: str = ""


class CheckoutDTO(BaseModel):
    """Immutable checkout request.

    ``payment_method`` is normalized (trimmed, lower case) but not checked
    here; ``CheckoutService`` rejects unknown methods with
    ``InvalidPaymentMethod`` before opening its transaction.
    """

    model_config = ConfigDict(frozen=True)

    user_id: int
    payment_method: str
    address: Optional[CheckoutAddressDTO] = None
    draft_item_id: Optional[UUID] = None

    @field_validator("payment_method")
    @classmethod
    def normalize_payment_method(cls, v: str) -> str:
        return v.strip().lower()


# ---------------------------------------------------------------------------
# Output DTOs
# ---------------------------------------------------------------------------


class CheckoutOrderDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    order_id: UUID = Field(serialization_alias="ordenId")
    folio: str
    total: Decimal
    delivery_id: UUID = Field(serialization_alias="entregaId")


class CheckoutResultDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    user_id: int = Field(serialization_alias="usuarioId")
    items_processed: int = Field(serialization_alias="itemsProcesados")
    orders: List[CheckoutOrderDTO] = Field(serialization_alias="ordenes")


class StateDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    code: str
    name: str = Field(serialization_alias="nombre")
    step: Optional[int] = Field(default=None, serialization_alias="paso")

    @classmethod
    def from_entity(cls, state: State) -> StateDTO:
        return cls(code=state.code, name=state.name, step=state.public_step)


class TrackingOrderDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: UUID
    folio: str
    total: Decimal
    state: StateDTO = Field(serialization_alias="estado")
    payment_method: str = Field(serialization_alias="metodoPago")
    payment_status: str = Field(serialization_alias="estadoPago")
    qr_text: str = Field(serialization_alias="qr")
    created_at: datetime = Field(serialization_alias="creadoEn")
    updated_at: datetime = Field(serialization_alias="actualizadoEn")

    @classmethod
    def from_entity(cls, order: Order) -> TrackingOrderDTO:
        return cls(
            id=order.id,
            folio=order.folio,
            total=order.total,
            state=StateDTO.from_entity(order.current_state),
            payment_method=order.payment_method,
            payment_status=order.payment_status,
            qr_text=order.qr_text,
            created_at=order.created_at,
            updated_at=order.updated_at,
        )


class TrackingDeliveryDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: UUID
    status: str = Field(serialization_alias="estado")
    courier_user_id: Optional[int] = Field(serialization_alias="repartidorUsuarioId")
    cash_collected_at: Optional[datetime] = Field(serialization_alias="cobradoEn")
    delivered_at: Optional[datetime] = Field(serialization_alias="entregadoEn")

    @classmethod
    def from_entity(cls, delivery: Delivery) -> TrackingDeliveryDTO:
        return cls(
            id=delivery.id,
            status=delivery.status,
            courier_user_id=delivery.courier_user_id,
            cash_collected_at=delivery.cash_collected_at,
            delivered_at=delivery.delivered_at,
        )


class TrackingEventDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    state: StateDTO = Field(serialization_alias="estado")
    lat: Optional[Decimal] = None
    lng: Optional[Decimal] = None
    created_at: datetime = Field(serialization_alias="fecha")

    @classmethod
    def from_entity(cls, event: DeliveryEvent) -> TrackingEventDTO:
        return cls(
            state=StateDTO.from_entity(event.state),
            lat=event.lat,
            lng=event.lng,
            created_at=event.created_at,
        )


class TrackingDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    order: TrackingOrderDTO = Field(serialization_alias="orden")
    delivery: Optional[TrackingDeliveryDTO] = Field(serialization_alias="entrega")
    events: List[TrackingEventDTO] = Field(serialization_alias="eventos")
    steps: List[StateDTO]


class OrderSummaryDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: UUID
    folio: str
    user_id: int = Field(serialization_alias="usuarioId")
    total: Decimal
    state: str = Field(serialization_alias="estado")
    payment_method: str = Field(serialization_alias="metodoPago")
    payment_status: str = Field(serialization_alias="estadoPago")
    item_count: int = Field(serialization_alias="cantidadItems")
    created_at: datetime = Field(serialization_alias="creadoEn")

    @classmethod
    def from_entity(cls, order: Order) -> OrderSummaryDTO:
        """Assumes ``items`` is prefetched."""
        return cls(
            id=order.id,
            folio=order.folio,
            user_id=order.user_id,
            total=order.total,
            state=order.current_state.code,
            payment_method=order.payment_method,
            payment_status=order.payment_status,
            item_count=sum(item.quantity for item in order.items.all()),
            created_at=order.created_at,
        )


class AssignmentDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    order_id: UUID = Field(serialization_alias="ordenId")
    operator_user_id: int = Field(serialization_alias="operadorUsuarioId")
    assigned_at: datetime = Field(serialization_alias="asignadoEn")

    @classmethod
    def from_entity(cls, assignment: OperatorAssignment) -> AssignmentDTO:
        return cls(
            order_id=assignment.order_id,
            operator_user_id=assignment.operator_user_id,
            assigned_at=assignment.assigned_at,
        )


class OperatorDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    user_id: int = Field(serialization_alias="usuarioId")
    username: str
    name: str = Field(serialization_alias="nombre")
