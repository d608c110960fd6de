"""Unit tests for domain events and their outbox payloads."""

from __future__ import annotations

from decimal import Decimal
from uuid import uuid4

import pytest

from modules.core.outbox import serialize_event_payload
from modules.delivery.events import DeliveryStatusChanged
from modules.orders.events import OrderCreated, OrderStateChanged
from modules.orders.models import Order

pytestmark = pytest.mark.unit


def test_order_registers_and_clears_domain_events():
    order = Order(folio="20260305-1234", total=Decimal("0.00"))

    assert order.domain_events == []

    event = OrderCreated(aggregate_id=order.id, folio=order.folio)
    order.add_domain_event(event)

    assert order.domain_events == [event]
    assert event.event_name == "OrderCreated"

    order.clear_domain_events()
    assert order.domain_events == []


def test_payload_is_json_safe():
    event = OrderStateChanged(
        aggregate_id=uuid4(), folio="20260305-1234", from_state="CRE", to_state="PROC"
    )

    payload = serialize_event_payload(event)

    assert payload["aggregate_id"] == str(event.aggregate_id)
    assert payload["event_name"] == "OrderStateChanged"
    assert isinstance(payload["occurred_on"], str)


def test_from_payload_round_trips():
    event = DeliveryStatusChanged(
        aggregate_id=uuid4(),
        folio="20260305-1234",
        from_status="pendiente",
        to_status="en_ruta",
    )

    rebuilt = DeliveryStatusChanged.from_payload(serialize_event_payload(event))

    assert rebuilt == event


def test_from_payload_ignores_unknown_keys():
    payload = {"aggregate_id": str(uuid4()), "folio": "X", "legacy": True}

    rebuilt = OrderCreated.from_payload(payload)

    assert rebuilt.folio == "X"
    assert rebuilt.user_id == 0
