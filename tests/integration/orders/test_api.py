"""API tests for checkout, staff state changes and order history."""

from __future__ import annotations

import pytest

from modules.carts.constants import CartStatus
from modules.carts.models import Cart
from modules.orders.models import Address, Order
from modules.orders.repositories.django_repository import OrderDjangoRepository

pytestmark = pytest.mark.integration

CHECKOUT_URL = "/api/v1/checkout"
HISTORY_URL = "/api/v1/orders/history"


class TestCheckoutAPI:
    def test_checkout_returns_orders(self, customer_client, order_process, make_cart):
        make_cart(7, [(1, 2, "50.00"), (2, 1, "120.00")])

        response = customer_client.post(
            CHECKOUT_URL,
            {
                "usuarioId": 7,
                "metodoPago": "Efectivo",
                "direccion": {"descripcion": "Zona 10", "telefono": "+502 5555 1234"},
            },
            format="json",
        )

        assert response.status_code == 201
        data = response.json()
        assert data["usuarioId"] == 7
        assert data["itemsProcesados"] == 2
        assert [order["total"] for order in data["ordenes"]] == ["100.00", "120.00"]
        assert all(order["entregaId"] for order in data["ordenes"])
        assert Cart.objects.get(user_id=7).status == CartStatus.CLOSED

    def test_address_contact_name(self, customer_client, order_process, make_cart):
        make_cart(7, [(1, 1, "10.00")])

        response = customer_client.post(
            CHECKOUT_URL,
            {
                "usuarioId": 7,
                "metodoPago": "efectivo",
                "direccion": {"descripcion": "Zona 10", "contactoNombre": "Ana"},
            },
            format="json",
        )

        assert response.status_code == 201
        address = Address.objects.get()
        assert address.contact_name == "Ana"
        assert address.description == "Zona 10"

    def test_missing_fields_rejected(self, customer_client, order_process):
        response = customer_client.post(CHECKOUT_URL, {}, format="json")

        assert response.status_code == 400
        body = response.json()
        assert body["code"] == "validation_error"
        assert "usuarioId" in body["details"]

    def test_unknown_payment_method(self, customer_client, order_process, make_cart):
        make_cart(7, [(1, 1, "10.00")])

        response = customer_client.post(
            CHECKOUT_URL, {"usuarioId": 7, "metodoPago": "cheque"}, format="json"
        )

        assert response.status_code == 400
        assert response.json()["code"] == "invalid_payment_method"
        assert Cart.objects.get(user_id=7).status == CartStatus.OPEN

    @pytest.mark.parametrize(
        ("lines", "code"),
        [(None, "no_open_cart"), ([], "empty_cart")],
    )
    def test_cart_preconditions(self, customer_client, order_process, make_cart, lines, code):
        if lines is not None:
            make_cart(7, lines)

        response = customer_client.post(
            CHECKOUT_URL, {"usuarioId": 7, "metodoPago": "tarjeta"}, format="json"
        )

        assert response.status_code == 400
        assert response.json()["code"] == code

    def test_unknown_draft_item_is_ignored(self, customer_client, order_process, make_cart):
        make_cart(7, [(1, 1, "10.00")])

        response = customer_client.post(
            CHECKOUT_URL,
            {
                "usuarioId": 7,
                "metodoPago": "tarjeta",
                "draftItemId": "0190a1b2-0000-7000-8000-000000000000",
            },
            format="json",
        )

        assert response.status_code == 201
        assert response.json()["itemsProcesados"] == 1
        assert Cart.objects.get(user_id=7).status == CartStatus.CLOSED

    def test_missing_seed_is_server_error(self, customer_client, make_cart):
        make_cart(7, [(1, 1, "10.00")])

        response = customer_client.post(
            CHECKOUT_URL, {"usuarioId": 7, "metodoPago": "tarjeta"}, format="json"
        )

        assert response.status_code == 500
        assert response.json()["code"] == "configuration_error"

    def test_requires_authentication(self, api_client):
        response = api_client.post(
            CHECKOUT_URL, {"usuarioId": 7, "metodoPago": "tarjeta"}, format="json"
        )

        assert response.status_code == 401


class TestSetStateAPI:
    def test_operator_moves_order(self, operator_client, operator_user, placed_order):
        response = operator_client.post(
            f"/api/v1/orders/{placed_order.folio}/set-state",
            {"code": "PROC"},
            format="json",
        )

        assert response.status_code == 200
        assert response.json() == {"ok": True}
        placed_order.refresh_from_db()
        assert placed_order.current_state.code == "PROC"
        entry = OrderDjangoRepository().list_history(placed_order)[0]
        assert entry.notes == "Cambio a PROC"
        assert entry.user_id == operator_user.pk

    def test_unknown_state(self, operator_client, placed_order):
        response = operator_client.post(
            f"/api/v1/orders/{placed_order.folio}/set-state",
            {"code": "LOST"},
            format="json",
        )

        assert response.status_code == 400
        assert response.json()["code"] == "unknown_state"

    def test_unknown_folio(self, operator_client, order_process):
        response = operator_client.post(
            "/api/v1/orders/20990101-0000/set-state", {"code": "PROC"}, format="json"
        )

        assert response.status_code == 404

    def test_customer_is_forbidden(self, customer_client, placed_order):
        response = customer_client.post(
            f"/api/v1/orders/{placed_order.folio}/set-state",
            {"code": "PROC"},
            format="json",
        )

        assert response.status_code == 403
        placed_order.refresh_from_db()
        assert placed_order.current_state.code == "CRE"

    def test_courier_is_forbidden(self, courier_client, placed_order):
        response = courier_client.post(
            f"/api/v1/orders/{placed_order.folio}/set-state",
            {"code": "PROC"},
            format="json",
        )

        assert response.status_code == 403

    def test_supervisor_may_move_order(self, supervisor_client, placed_order):
        response = supervisor_client.post(
            f"/api/v1/orders/{placed_order.folio}/set-state",
            {"code": "READY", "note": "Urgente"},
            format="json",
        )

        assert response.status_code == 200
        assert OrderDjangoRepository().list_history(placed_order)[0].notes == "Urgente"

    def test_spanish_field_names(self, operator_client, placed_order):
        response = operator_client.post(
            f"/api/v1/orders/{placed_order.folio}/set-state",
            {"codigo": "proc", "notas": "Desde caja"},
            format="json",
        )

        assert response.status_code == 200
        placed_order.refresh_from_db()
        assert placed_order.current_state.code == "PROC"
        assert OrderDjangoRepository().list_history(placed_order)[0].notes == "Desde caja"

    def test_code_is_required(self, operator_client, placed_order):
        response = operator_client.post(
            f"/api/v1/orders/{placed_order.folio}/set-state",
            {"notas": "sin codigo"},
            format="json",
        )

        assert response.status_code == 400
        body = response.json()
        assert body["code"] == "validation_error"
        assert "code" in body["details"]


class TestEventAPI:
    def test_manual_event(self, operator_client, placed_order):
        response = operator_client.post(
            f"/api/v1/orders/{placed_order.folio}/events", {}, format="json"
        )

        assert response.status_code == 200
        entry = OrderDjangoRepository().list_history(placed_order)[0]
        assert entry.notes == "Evento manual"
        assert entry.state.code == "CRE"

    def test_notas_synonym(self, operator_client, placed_order):
        response = operator_client.post(
            f"/api/v1/orders/{placed_order.folio}/events",
            {"notas": "Cliente llamó"},
            format="json",
        )

        assert response.status_code == 200
        assert OrderDjangoRepository().list_history(placed_order)[0].notes == "Cliente llamó"


class TestAdvanceAPI:
    def test_advance_to_proc(self, operator_client, placed_order):
        response = operator_client.post(
            f"/api/v1/operator/orders/{placed_order.id}/advance",
            {"to": "PROC"},
            format="json",
        )

        assert response.status_code == 200
        placed_order.refresh_from_db()
        assert placed_order.current_state.code == "PROC"

    def test_advance_to_done_rejected(self, operator_client, placed_order):
        response = operator_client.post(
            f"/api/v1/operator/orders/{placed_order.id}/advance",
            {"to": "DONE"},
            format="json",
        )

        assert response.status_code == 400
        assert response.json()["code"] == "validation_error"

    def test_skipping_a_step_is_rejected(self, operator_client, placed_order):
        response = operator_client.post(
            f"/api/v1/operator/orders/{placed_order.id}/advance",
            {"to": "READY"},
            format="json",
        )

        assert response.status_code == 409
        assert response.json()["code"] == "invalid_transition"


class TestHistoryAPI:
    def test_paginated(self, customer_client, order_process, make_cart, checkout_service):
        from modules.orders.dtos import CheckoutDTO

        make_cart(7, [(n, 1, "10.00") for n in range(1, 4)])
        checkout_service.checkout(CheckoutDTO(user_id=7, payment_method="efectivo"))

        response = customer_client.get(HISTORY_URL, {"usuarioId": 7, "pageSize": 2})

        assert response.status_code == 200
        data = response.json()
        assert data["count"] == 3
        assert len(data["results"]) == 2
        assert data["results"][0]["estado"] == "CRE"
        assert data["next"] is not None

    def test_only_own_orders(self, customer_client, placed_order):
        response = customer_client.get(HISTORY_URL, {"usuarioId": 8})

        assert response.json()["count"] == 0

    def test_filter_by_state(self, customer_client, placed_order, executor):
        executor.apply(placed_order.folio, "PROC")

        proc = customer_client.get(HISTORY_URL, {"usuarioId": 7, "estado": "proc"})
        cre = customer_client.get(HISTORY_URL, {"usuarioId": 7, "estado": "CRE"})

        assert proc.json()["count"] == 1
        assert cre.json()["count"] == 0

    def test_filter_by_total(self, customer_client, placed_order):
        response = customer_client.get(HISTORY_URL, {"usuarioId": 7, "totalMin": "150"})

        assert response.json()["count"] == 0

    def test_bad_filter_value(self, customer_client, placed_order):
        response = customer_client.get(HISTORY_URL, {"usuarioId": 7, "desde": "ayer"})

        assert response.status_code == 400
        assert response.json()["code"] == "validation_error"

    def test_usuario_id_required(self, customer_client, order_process):
        response = customer_client.get(HISTORY_URL)

        assert response.status_code == 400
        assert Order.objects.count() == 0
