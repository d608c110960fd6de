"""Django ORM implementation of the workflow definition repository."""

from __future__ import annotations

from typing import List, Optional

import structlog
from django.db import IntegrityError, transaction

from modules.workflow.constants import StateKind
from modules.workflow.models import Process, State, Transition
from modules.workflow.repositories.interfaces import IWorkflowRepository

logger = structlog.get_logger(__name__)


class WorkflowDjangoRepository(IWorkflowRepository):
    """Concrete workflow repository backed by Django ORM."""

    def get_process(self, code: str) -> Optional[Process]:
        return Process.objects.filter(code=code).first()

    def get_initial_state(self, process: Process) -> Optional[State]:
        return State.objects.filter(process=process, kind=StateKind.INITIAL).first()

    def get_state_by_code(self, process: Process, code: str) -> Optional[State]:
        return State.objects.filter(process=process, code__iexact=code).first()

    def get_transition(
        self, process: Process, from_state: State, to_state: State
    ) -> Optional[Transition]:
        return Transition.objects.filter(
            process=process,
            from_state=from_state,
            to_state=to_state,
        ).first()

    def create_transition(
        self,
        process: Process,
        from_state: State,
        to_state: State,
        code: str,
        name: str,
    ) -> Transition:
        """Insert the edge inside a savepoint.

        A concurrent writer may have inserted the same edge between our
        look-up and this insert; the unique constraint rejects the second
        row and we return the winner instead.
        """
        try:
            with transaction.atomic():
                transition = Transition.objects.create(
                    process=process,
                    from_state=from_state,
                    to_state=to_state,
                    code=code,
                    name=name,
                )
        except IntegrityError:
            existing = self.get_transition(process, from_state, to_state)
            if existing is None:
                raise
            return existing

        logger.info(
            "workflow.transition_synthesized",
            process=process.code,
            code=code,
        )
        return transition

    def list_public_steps(self, process: Process) -> List[State]:
        return list(
            State.objects.filter(process=process, public_step__isnull=False).order_by(
                "public_step", "code"
            )
        )
