"""Unit tests for WorkflowDefinitionStore with a mocked repository."""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from modules.workflow.constants import SYNTHESIZED_TRANSITION_NAME, TransitionPolicy
from modules.workflow.exceptions import (
    InvalidTransition,
    MissingInitialState,
    MissingProcess,
)
from modules.workflow.services import WorkflowDefinitionStore

pytestmark = pytest.mark.unit


@pytest.fixture()
def repo():
    return MagicMock()


@pytest.fixture()
def store(repo):
    return WorkflowDefinitionStore(repo)


@pytest.fixture()
def process():
    return SimpleNamespace(code="ORD")


def _state(code):
    return SimpleNamespace(code=code)


class TestResolve:
    def test_resolve_process_uses_configured_code(self, store, repo, settings):
        settings.ORDER_PROCESS_CODE = "ORD"
        repo.get_process.return_value = SimpleNamespace(code="ORD")

        assert store.resolve_process().code == "ORD"
        repo.get_process.assert_called_once_with("ORD")

    def test_missing_process_is_configuration_error(self, store, repo):
        repo.get_process.return_value = None

        with pytest.raises(MissingProcess) as exc_info:
            store.resolve_process("XYZ")

        assert exc_info.value.status_code == 500
        assert exc_info.value.code == "configuration_error"

    def test_missing_initial_state(self, store, repo, process):
        repo.get_initial_state.return_value = None

        with pytest.raises(MissingInitialState):
            store.resolve_initial_state(process)

    def test_unknown_state_resolves_to_none(self, store, repo, process):
        repo.get_state_by_code.return_value = None

        assert store.resolve_state_by_code(process, "NOPE") is None


class TestEnsureTransition:
    def test_existing_edge_is_returned_without_insert(self, store, repo, process):
        edge = SimpleNamespace(code="SET-CRE->PROC")
        repo.get_transition.return_value = edge

        result = store.ensure_transition(process, _state("CRE"), _state("PROC"))

        assert result is edge
        repo.create_transition.assert_not_called()

    def test_permissive_policy_synthesizes_edge(self, store, repo, process):
        repo.get_transition.return_value = None
        repo.create_transition.side_effect = lambda p, f, t, code, name: SimpleNamespace(
            code=code, name=name
        )

        result = store.ensure_transition(
            process,
            _state("CRE"),
            _state("DONE"),
            policy=TransitionPolicy.PERMISSIVE,
        )

        assert result.code == "SET-CRE->DONE"
        assert result.name == SYNTHESIZED_TRANSITION_NAME

    def test_strict_policy_rejects_undeclared_edge(self, store, repo, process):
        repo.get_transition.return_value = None

        with pytest.raises(InvalidTransition):
            store.ensure_transition(
                process, _state("CRE"), _state("DONE"), policy=TransitionPolicy.STRICT
            )

        repo.create_transition.assert_not_called()

    def test_policy_defaults_to_settings(self, store, repo, process, settings):
        settings.WORKFLOW_TRANSITION_POLICY = TransitionPolicy.STRICT
        repo.get_transition.return_value = None

        with pytest.raises(InvalidTransition):
            store.ensure_transition(process, _state("CRE"), _state("DONE"))
