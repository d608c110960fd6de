"""Workflow definition repository interface.

Read access to the Process/State/Transition catalogue plus the single
write the executor is allowed to make: persisting a synthesized edge.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, List, Optional

if TYPE_CHECKING:
    from modules.workflow.models import Process, State, Transition


class IWorkflowRepository(ABC):
    @abstractmethod
    def get_process(self, code: str) -> Optional[Process]:
        """Retrieve a Process by its code."""

    @abstractmethod
    def get_initial_state(self, process: Process) -> Optional[State]:
        """Return the State flagged ``I`` for the Process."""

    @abstractmethod
    def get_state_by_code(self, process: Process, code: str) -> Optional[State]:
        """Case-insensitive look-up of a State within the Process."""

    @abstractmethod
    def get_transition(
        self, process: Process, from_state: State, to_state: State
    ) -> Optional[Transition]:
        """Return the edge (process, from, to) if declared."""

    @abstractmethod
    def create_transition(
        self,
        process: Process,
        from_state: State,
        to_state: State,
        code: str,
        name: str,
    ) -> Transition:
        """Persist a new edge. Returns the existing one on a uniqueness race."""

    @abstractmethod
    def list_public_steps(self, process: Process) -> List[State]:
        """States with a public step number, ordered by that number."""
