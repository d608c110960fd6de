"""Unit tests for Orders event handlers and in-memory bus."""

from __future__ import annotations

import logging
from unittest.mock import MagicMock
from uuid import uuid4

import pytest

from modules.orders.events import OrderCreated, OrderStateChanged, PaymentRecorded
from modules.orders.handlers import (
    OrderCreatedHandler,
    OrderStateChangedHandler,
    PaymentRecordedHandler,
)
from shared.infrastructure.bus import InMemoryEventBus

pytestmark = pytest.mark.unit


def _messages(caplog):
    return [record.getMessage() for record in caplog.records]


def test_order_created_handler_logs(caplog):
    event = OrderCreated(aggregate_id=uuid4(), folio="20260305-1234", user_id=7)

    with caplog.at_level(logging.INFO, logger="modules.orders.handlers"):
        OrderCreatedHandler().handle(event)

    assert any(
        "order.event.created" in message and "20260305-1234" in message
        for message in _messages(caplog)
    )


def test_state_changed_handler_logs(caplog):
    event = OrderStateChanged(
        aggregate_id=uuid4(), folio="20260305-1234", from_state="CRE", to_state="PROC"
    )

    with caplog.at_level(logging.INFO, logger="modules.orders.handlers"):
        OrderStateChangedHandler().handle(event)

    assert any("order.event.state_changed" in m for m in _messages(caplog))


def test_payment_recorded_handler_logs(caplog):
    event = PaymentRecorded(
        aggregate_id=uuid4(), folio="20260305-1234", method="cash", status="pagado"
    )

    with caplog.at_level(logging.INFO, logger="modules.orders.handlers"):
        PaymentRecordedHandler().handle(event)

    assert any("order.event.payment_recorded" in m for m in _messages(caplog))


def test_bus_dispatches_by_event_type():
    bus = InMemoryEventBus()
    created, changed = MagicMock(), MagicMock()
    bus.subscribe(OrderCreated, created)
    bus.subscribe(OrderStateChanged, changed)
    event = OrderCreated(aggregate_id=uuid4())

    bus.publish(event)

    created.handle.assert_called_once_with(event)
    changed.handle.assert_not_called()


def test_bus_ignores_duplicate_subscription():
    bus = InMemoryEventBus()
    handler = MagicMock()
    bus.subscribe(OrderCreated, handler)
    bus.subscribe(OrderCreated, handler)

    bus.publish(OrderCreated(aggregate_id=uuid4()))

    assert handler.handle.call_count == 1
    assert bus.event_class_for("OrderCreated") is OrderCreated
    assert bus.event_class_for("Unknown") is None
