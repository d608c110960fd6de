"""Integration tests for the customer tracking view."""

from __future__ import annotations

from datetime import timedelta
from decimal import Decimal

import pytest
from django.utils import timezone

from modules.delivery.models import Delivery, DeliveryEvent

pytestmark = pytest.mark.integration


def _url(folio):
    return f"/api/v1/orders/{folio}/tracking"


@pytest.fixture()
def many_events(placed_order, order_process):
    """25 delivery events one minute apart, the last one being the newest."""
    delivery = Delivery.objects.get(order=placed_order)
    state = order_process.states.get(code="CRE")
    base = timezone.now() - timedelta(hours=1)
    events = []
    for minute in range(25):
        event = DeliveryEvent.objects.create(
            delivery=delivery,
            state=state,
            lat=Decimal("14.600000") + Decimal(minute) / 1000,
            lng=Decimal("-90.500000"),
        )
        DeliveryEvent.objects.filter(id=event.id).update(
            created_at=base + timedelta(minutes=minute)
        )
        events.append(event)
    return events


def test_returns_twenty_newest_first(customer_client, placed_order, many_events):
    response = customer_client.get(_url(placed_order.folio))

    assert response.status_code == 200
    events = response.json()["eventos"]
    assert len(events) == 20
    latitudes = [Decimal(event["lat"]) for event in events]
    assert latitudes[0] == Decimal("14.624000")
    assert latitudes == sorted(latitudes, reverse=True)


def test_event_limit_is_configurable(customer_client, placed_order, many_events, settings):
    settings.TRACKING_EVENT_LIMIT = 5

    response = customer_client.get(_url(placed_order.folio))

    assert len(response.json()["eventos"]) == 5


def test_snapshot_shape(customer_client, placed_order):
    response = customer_client.get(_url(placed_order.folio))

    data = response.json()
    assert data["orden"]["folio"] == placed_order.folio
    assert data["orden"]["estado"]["code"] == "CRE"
    assert data["orden"]["qr"] == f"ORD-{placed_order.folio}"
    assert data["orden"]["estadoPago"] == "pendiente"
    assert data["entrega"]["estado"] == "pendiente"
    assert data["eventos"] == []
    assert [step["code"] for step in data["steps"]] == ["CRE", "PROC", "READY", "DONE"]
    assert [step["paso"] for step in data["steps"]] == [1, 2, 3, 4]


def test_unknown_folio(customer_client, order_process):
    response = customer_client.get(_url("20990101-0000"))

    assert response.status_code == 404
    assert response.json()["code"] == "order_not_found"


def test_requires_authentication(api_client, placed_order):
    response = api_client.get(_url(placed_order.folio))

    assert response.status_code == 401
