"""Workflow Definition Store.

Read-only resolution of the seeded lifecycle graph, plus
``ensure_transition`` which is the one place an edge may be added at
request time (permissive policy only).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional

import structlog
from django.conf import settings

from modules.workflow.constants import (
    SYNTHESIZED_TRANSITION_NAME,
    TransitionPolicy,
    transition_code,
)
from modules.workflow.exceptions import (
    InvalidTransition,
    MissingInitialState,
    MissingProcess,
)

if TYPE_CHECKING:
    from modules.workflow.models import Process, State, Transition
    from modules.workflow.repositories.interfaces import IWorkflowRepository

logger = structlog.get_logger(__name__)


def configured_policy() -> str:
    return getattr(settings, "WORKFLOW_TRANSITION_POLICY", TransitionPolicy.PERMISSIVE)


class WorkflowDefinitionStore:
    def __init__(self, repository: IWorkflowRepository) -> None:
        self._repo = repository

    def resolve_process(self, code: Optional[str] = None) -> Process:
        """Return the Process for ``code`` (defaults to ``ORDER_PROCESS_CODE``).

        Raises:
            MissingProcess: the seed data has no such Process.
        """
        code = code or settings.ORDER_PROCESS_CODE
        process = self._repo.get_process(code)
        if process is None:
            logger.error("workflow.process_missing", process=code)
            raise MissingProcess(f"Process '{code}' is not defined.")
        return process

    def resolve_initial_state(self, process: Process) -> State:
        """Raises:
        MissingInitialState: no State of the Process is flagged ``I``.
        """
        state = self._repo.get_initial_state(process)
        if state is None:
            logger.error("workflow.initial_state_missing", process=process.code)
            raise MissingInitialState(
                f"Process '{process.code}' has no initial state."
            )
        return state

    def resolve_state_by_code(self, process: Process, code: str) -> Optional[State]:
        return self._repo.get_state_by_code(process, code)

    def resolve_transition(
        self, process: Process, from_state: State, to_state: State
    ) -> Optional[Transition]:
        return self._repo.get_transition(process, from_state, to_state)

    def ensure_transition(
        self,
        process: Process,
        from_state: State,
        to_state: State,
        policy: Optional[str] = None,
    ) -> Transition:
        """Return the (process, from, to) edge, synthesizing it if allowed.

        Under the ``strict`` policy an undeclared edge is rejected instead.

        Raises:
            InvalidTransition: edge missing and policy is ``strict``.
        """
        transition = self._repo.get_transition(process, from_state, to_state)
        if transition is not None:
            return transition

        policy = policy or configured_policy()
        if policy == TransitionPolicy.STRICT:
            logger.warning(
                "workflow.transition_rejected",
                process=process.code,
                from_state=from_state.code,
                to_state=to_state.code,
            )
            raise InvalidTransition(
                f"Cannot transition from {from_state.code} to {to_state.code}."
            )

        return self._repo.create_transition(
            process,
            from_state,
            to_state,
            code=transition_code(from_state.code, to_state.code),
            name=SYNTHESIZED_TRANSITION_NAME,
        )

    def public_steps(self, process: Process) -> List[State]:
        return self._repo.list_public_steps(process)
