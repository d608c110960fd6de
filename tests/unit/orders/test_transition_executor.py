"""Unit tests for TransitionExecutor with mocked dependencies."""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import MagicMock
from uuid import uuid4

import pytest

from modules.core.exceptions import RequestValidationError
from modules.orders.exceptions import OrderNotFound, OrderNotInState
from modules.orders.services import TransitionExecutor, clamp_limit, require_state
from modules.workflow.constants import TransitionPolicy
from modules.workflow.exceptions import UnknownState

pytestmark = pytest.mark.unit


class StubOrder:
    def __init__(self, state_code="CRE"):
        self.id = uuid4()
        self.folio = "20260305-1234"
        self.process = SimpleNamespace(code="ORD")
        self.current_state = SimpleNamespace(code=state_code)
        self.events = []

    def add_domain_event(self, event):
        self.events.append(event)


def _call_apply(executor, *args, **kwargs):
    return TransitionExecutor.apply.__wrapped__(executor, *args, **kwargs)


def _call_add_event(executor, *args, **kwargs):
    return TransitionExecutor.add_event.__wrapped__(executor, *args, **kwargs)


@pytest.fixture()
def deps():
    order_repo = MagicMock()
    delivery_repo = MagicMock()
    store = MagicMock()
    store.ensure_transition.side_effect = lambda p, f, t, policy=None: SimpleNamespace(
        code=f"SET-{f.code}->{t.code}"
    )
    executor = TransitionExecutor(order_repo, delivery_repo, store)
    return executor, order_repo, delivery_repo, store


class TestApply:
    def test_unknown_order(self, deps):
        executor, order_repo, _, _ = deps
        order_repo.get_by_ref.return_value = None

        with pytest.raises(OrderNotFound):
            _call_apply(executor, "20990101-0000", "PROC")

    def test_unknown_target_state_writes_nothing(self, deps):
        executor, order_repo, delivery_repo, store = deps
        order_repo.get_by_ref.return_value = StubOrder()
        store.resolve_state_by_code.return_value = None

        with pytest.raises(UnknownState):
            _call_apply(executor, "20260305-1234", "NOPE")

        order_repo.save.assert_not_called()
        order_repo.append_history.assert_not_called()
        delivery_repo.add_event.assert_not_called()

    def test_default_note_names_target_state(self, deps):
        executor, order_repo, _, store = deps
        order = StubOrder()
        order_repo.get_by_ref.return_value = order
        store.resolve_state_by_code.return_value = SimpleNamespace(code="PROC")

        _call_apply(executor, order.folio, "proc", acting_user_id=5)

        kwargs = order_repo.append_history.call_args.kwargs
        assert kwargs["notes"] == "Cambio a PROC"
        assert kwargs["user_id"] == 5
        assert order.current_state.code == "PROC"

    def test_locks_the_order_row(self, deps):
        executor, order_repo, _, store = deps
        order_repo.get_by_ref.return_value = StubOrder()
        store.resolve_state_by_code.return_value = SimpleNamespace(code="PROC")

        _call_apply(executor, "20260305-1234", "PROC")

        order_repo.get_by_ref.assert_called_once_with("20260305-1234", for_update=True)

    def test_failed_precondition_writes_nothing(self, deps):
        executor, order_repo, delivery_repo, store = deps
        order_repo.get_by_ref.return_value = StubOrder("CRE")

        with pytest.raises(OrderNotInState):
            _call_apply(
                executor,
                "20260305-1234",
                "DONE",
                precondition=require_state("READY"),
            )

        store.ensure_transition.assert_not_called()
        order_repo.save.assert_not_called()
        delivery_repo.get_or_create_for_order.assert_not_called()

    def test_state_change_event_is_collected(self, deps):
        executor, order_repo, _, store = deps
        order = StubOrder("PROC")
        order_repo.get_by_ref.return_value = order
        store.resolve_state_by_code.return_value = SimpleNamespace(code="READY")

        _call_apply(executor, order.folio, "READY")

        assert len(order.events) == 1
        assert order.events[0].from_state == "PROC"
        assert order.events[0].to_state == "READY"
        order_repo.save.assert_called_once_with(order)


class TestAddEvent:
    def test_reflexive_move_on_current_state(self, deps):
        executor, order_repo, delivery_repo, store = deps
        order = StubOrder("READY")
        order_repo.get_by_ref.return_value = order

        result = _call_add_event(executor, order.folio)

        from_state, to_state = store.ensure_transition.call_args.args[1:3]
        assert from_state is to_state
        assert result.transition.code == "SET-READY->READY"
        assert order_repo.append_history.call_args.kwargs["notes"] == "Evento manual"
        delivery_repo.add_event.assert_called_once()


class TestAdvance:
    def test_rejects_targets_other_than_proc_and_ready(self, deps):
        executor, order_repo, _, _ = deps

        with pytest.raises(RequestValidationError):
            executor.advance("20260305-1234", "DONE")

        order_repo.get_by_ref.assert_not_called()

    def test_uses_strict_policy(self, deps, monkeypatch):
        executor, _, _, _ = deps
        apply = MagicMock()
        monkeypatch.setattr(executor, "apply", apply)

        executor.advance("20260305-1234", "proc", note="listo")

        assert apply.call_args.kwargs["policy"] == TransitionPolicy.STRICT
        assert apply.call_args.kwargs["note"] == "listo"


class TestHelpers:
    @pytest.mark.parametrize(
        ("requested", "expected"),
        [(None, 50), (0, 50), (-3, 50), (10, 10), (500, 200)],
    )
    def test_clamp_limit(self, requested, expected):
        assert clamp_limit(requested) == expected

    def test_require_state_is_case_insensitive(self):
        require_state("READY")(StubOrder("ready"))
