"""Unit tests for PersonalizationCopier with a mocked repository."""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import MagicMock
from uuid import uuid4

import pytest

from modules.personalization.owners import (
    CartItemOwner,
    OrderItemOwner,
    owner_lookup,
)
from modules.personalization.services import PersonalizationCopier

pytestmark = pytest.mark.unit


def _personalization(side):
    return SimpleNamespace(id=uuid4(), side=side)


@pytest.fixture()
def repo():
    repo = MagicMock()
    repo.clone.side_effect = lambda source, owner: SimpleNamespace(
        id=uuid4(), side=source.side, owner=owner
    )
    repo.top_photo_file.return_value = None
    return repo


@pytest.fixture()
def order_item():
    return SimpleNamespace(id=uuid4(), order=SimpleNamespace(id=uuid4()))


def test_no_personalization_returns_empty(repo, order_item):
    repo.list_for_owner.return_value = []

    sides = PersonalizationCopier(repo).copy(uuid4(), order_item)

    assert sides.is_empty
    repo.set_item_sides.assert_not_called()


def test_both_sides_are_cloned_onto_order_item(repo, order_item):
    repo.list_for_owner.return_value = [_personalization("A"), _personalization("b")]

    sides = PersonalizationCopier(repo).copy(uuid4(), order_item)

    assert sides.side_a.side == "A"
    assert sides.side_b.side == "b"
    assert sides.side_a.owner == OrderItemOwner(order_item.id)
    repo.set_item_sides.assert_called_once_with(order_item, sides.side_a, sides.side_b)


def test_draft_item_used_only_when_cart_line_has_none(repo, order_item):
    source_id, draft_id = uuid4(), uuid4()
    repo.list_for_owner.side_effect = [[], [_personalization("A")]]

    sides = PersonalizationCopier(repo).copy(source_id, order_item, draft_id)

    owners = [call.args[0] for call in repo.list_for_owner.call_args_list]
    assert owners == [CartItemOwner(source_id), CartItemOwner(draft_id)]
    assert sides.side_b is None


def test_top_photo_becomes_order_image(repo, order_item):
    photo = SimpleNamespace(id=uuid4())
    repo.list_for_owner.return_value = [_personalization("A")]
    repo.top_photo_file.return_value = photo

    PersonalizationCopier(repo).copy(uuid4(), order_item)

    repo.upsert_order_image.assert_called_once_with(order_item.order, photo, "A")
    repo.reparent_file.assert_called_once_with(photo, order_item.order)


def test_owner_lookup_rejects_unknown_owner():
    assert owner_lookup(CartItemOwner(1)) == {"cart_item_id": 1}
    assert owner_lookup(OrderItemOwner(2)) == {"order_item_id": 2}
    with pytest.raises(TypeError):
        owner_lookup("cart-item")
