"""Integration tests for folio allocation in OrderDjangoRepository."""

from __future__ import annotations

from decimal import Decimal
from unittest.mock import patch

import pytest
from django.db import IntegrityError

from modules.orders.exceptions import FolioCollision
from modules.orders.models import Order
from modules.orders.repositories.django_repository import OrderDjangoRepository

pytestmark = pytest.mark.integration


@pytest.fixture()
def repo():
    return OrderDjangoRepository()


@pytest.fixture()
def initial_state(order_process):
    return order_process.states.get(code="CRE")


def _create(repo, process, state):
    return repo.create_order(
        user_id=7,
        process=process,
        state=state,
        total=Decimal("10.00"),
        payment_method="efectivo",
    )


def test_taken_candidate_is_skipped(repo, order_process, initial_state):
    first = _create(repo, order_process, initial_state)

    with patch.object(
        Order, "generate_folio", side_effect=[first.folio, "20260305-5555"]
    ):
        second = _create(repo, order_process, initial_state)

    assert second.folio == "20260305-5555"


def test_exhausted_retries_raise_folio_collision(
    repo, order_process, initial_state, settings
):
    settings.FOLIO_MAX_RETRIES = 3
    first = _create(repo, order_process, initial_state)

    with patch.object(Order, "generate_folio", return_value=first.folio) as gen:
        with pytest.raises(FolioCollision) as exc_info:
            _create(repo, order_process, initial_state)

    assert gen.call_count == 3
    assert exc_info.value.status_code == 409
    assert Order.objects.count() == 1


def test_lost_insert_race_is_retried(repo, order_process, initial_state):
    real_save = Order.save
    calls = {"n": 0}

    def flaky_save(self, *args, **kwargs):
        calls["n"] += 1
        if calls["n"] == 1:
            raise IntegrityError("UNIQUE constraint failed: orders.folio")
        return real_save(self, *args, **kwargs)

    with patch.object(Order, "save", flaky_save):
        order = _create(repo, order_process, initial_state)

    assert calls["n"] == 2
    assert Order.objects.filter(id=order.id).exists()


def test_folio_lookup_by_uuid_or_folio(repo, order_process, initial_state):
    order = _create(repo, order_process, initial_state)

    assert repo.get_by_ref(order.folio).id == order.id
    assert repo.get_by_ref(order.id).id == order.id
    assert repo.get_by_ref(str(order.id)).id == order.id
    assert repo.get_by_ref("20990101-0000") is None
