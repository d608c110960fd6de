"""Integration tests for the courier sub-workflow."""

from __future__ import annotations

import pytest

from modules.core.models import OutboxEvent
from modules.delivery.constants import DeliveryStatus
from modules.delivery.models import Delivery
from modules.delivery.repositories.django_repository import DeliveryDjangoRepository
from modules.delivery.services import DeliveryWorkflow
from modules.orders.constants import PaymentStatus
from modules.orders.exceptions import InvalidPaymentMethod, OrderNotInState
from modules.orders.models import Payment
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.workflow.exceptions import UndeclaredTransition
from modules.workflow.models import Transition

pytestmark = pytest.mark.integration


@pytest.fixture()
def workflow(executor, workflow_store):
    return DeliveryWorkflow(
        executor=executor,
        order_repository=OrderDjangoRepository(),
        delivery_repository=DeliveryDjangoRepository(),
        workflow_store=workflow_store,
    )


@pytest.fixture()
def ready_order(placed_order, executor):
    executor.apply(placed_order.folio, "PROC")
    executor.apply(placed_order.folio, "READY")
    placed_order.refresh_from_db()
    return placed_order


class TestConfirmReceived:
    def test_ready_order_goes_en_route(self, ready_order, workflow):
        delivery = workflow.confirm_received(ready_order.folio, courier_user_id=21)

        delivery.refresh_from_db()
        assert delivery.status == DeliveryStatus.EN_ROUTE
        assert delivery.courier_user_id == 21
        history = OrderDjangoRepository().list_history(ready_order)
        assert history[0].notes == "Pedido recibido por repartidor"
        assert history[0].state.code == "READY"

    def test_not_ready_leaves_delivery_unmodified(self, placed_order, workflow):
        before = Delivery.objects.get(order=placed_order)

        with pytest.raises(OrderNotInState) as exc_info:
            workflow.confirm_received(placed_order.folio, courier_user_id=21)

        after = Delivery.objects.get(order=placed_order)
        assert exc_info.value.status_code == 409
        assert after.status == before.status == DeliveryStatus.PENDING
        assert after.courier_user_id is None
        assert after.updated_at == before.updated_at
        assert not after.events.exists()


class TestConfirmPayment:
    def test_cash_is_paid_and_stamps_delivery(self, ready_order, workflow):
        payment = workflow.confirm_payment(ready_order.folio, "CASH")

        assert payment.status == PaymentStatus.PAID
        assert payment.paid_at is not None
        assert payment.amount == ready_order.total
        ready_order.refresh_from_db()
        assert ready_order.payment_status == PaymentStatus.PAID
        assert Delivery.objects.get(order=ready_order).cash_collected_at is not None

    def test_card_is_authorized_only(self, ready_order, workflow):
        payment = workflow.confirm_payment(ready_order.folio, "card", reference="AUTH-77")

        assert payment.status == PaymentStatus.AUTHORIZED
        assert payment.paid_at is None
        assert payment.provider_reference == "AUTH-77"
        assert Delivery.objects.get(order=ready_order).cash_collected_at is None

    def test_unknown_method_writes_nothing(self, ready_order, workflow):
        with pytest.raises(InvalidPaymentMethod):
            workflow.confirm_payment(ready_order.folio, "bitcoin")

        assert not Payment.objects.exists()

    def test_payment_event_in_outbox(self, ready_order, workflow):
        workflow.confirm_payment(ready_order.folio, "transfer")

        assert OutboxEvent.objects.filter(
            event_type="PaymentRecorded", aggregate_id=str(ready_order.id)
        ).exists()


class TestFinishDelivery:
    def test_ready_order_is_delivered(self, ready_order, workflow):
        workflow.confirm_received(ready_order.folio, courier_user_id=21)

        result = workflow.finish_delivery(ready_order.folio, courier_user_id=21)

        assert result.order.current_state.code == "DONE"
        delivery = Delivery.objects.get(order=ready_order)
        assert delivery.status == DeliveryStatus.DELIVERED
        assert delivery.delivered_at is not None
        assert OutboxEvent.objects.filter(
            event_type="DeliveryStatusChanged", topic="delivery"
        ).count() == 2

    def test_requires_ready_state(self, placed_order, workflow):
        with pytest.raises(OrderNotInState):
            workflow.finish_delivery(placed_order.folio)

        placed_order.refresh_from_db()
        assert placed_order.current_state.code == "CRE"

    def test_missing_finish_edge_is_configuration_error(
        self, ready_order, workflow, order_process
    ):
        Transition.objects.filter(
            process=order_process, from_state__code="READY", to_state__code="DONE"
        ).delete()

        with pytest.raises(UndeclaredTransition) as exc_info:
            workflow.finish_delivery(ready_order.folio)

        assert exc_info.value.status_code == 500
        ready_order.refresh_from_db()
        assert ready_order.current_state.code == "READY"

    def test_missing_done_state_is_configuration_error(
        self, ready_order, workflow, order_process
    ):
        order_process.states.filter(code="DONE").update(code="FIN")

        with pytest.raises(UndeclaredTransition):
            workflow.finish_delivery(ready_order.folio)
