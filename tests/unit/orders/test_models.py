"""Unit tests for Order model helpers."""

from __future__ import annotations

import re
from decimal import Decimal

import pytest
from freezegun import freeze_time

from modules.orders.models import Order, OrderItem

pytestmark = pytest.mark.unit

FOLIO_RE = re.compile(r"^\d{8}-\d{4}$")


class TestFolio:
    @freeze_time("2026-03-05 12:00:00")
    def test_folio_is_date_stamp_plus_four_digits(self):
        folio = Order.generate_folio()

        assert FOLIO_RE.match(folio)
        assert folio.startswith("20260305-")
        assert 1000 <= int(folio.split("-")[1]) <= 9999

    @freeze_time("2026-12-31 23:59:59")
    def test_folio_uses_utc_date(self):
        assert Order.generate_folio().startswith("20261231-")


class TestOrderItem:
    def test_subtotal_is_quantity_times_unit_price(self, placed_order):
        item = OrderItem(
            order=placed_order,
            product_id=3,
            quantity=3,
            unit_price=Decimal("12.50"),
        )
        item.save()

        assert item.subtotal == Decimal("37.50")

    def test_qr_text_derived_from_folio(self, placed_order):
        assert placed_order.qr_text == f"ORD-{placed_order.folio}"
