"""Process, State and Transition models.

A Process is a small finite automaton seeded at deploy time:

- exactly one State per Process has kind ``I`` (partial unique constraint);
- a Transition is unique per (process, from_state, to_state);
- ``public_step`` numbers the States shown on customer progress bars.
"""

from __future__ import annotations

from django.db import models

from modules.core.models import BaseModel
from modules.workflow.constants import StateKind


class Process(BaseModel):
    code: models.CharField = models.CharField(max_length=20, unique=True)
    name: models.CharField = models.CharField(max_length=120)

    class Meta:
        db_table = "workflow_processes"
        ordering = ["code"]

    def __str__(self) -> str:
        return self.code


class State(BaseModel):
    process: models.ForeignKey = models.ForeignKey(
        "workflow.Process",
        on_delete=models.CASCADE,
        related_name="states",
    )
    code: models.CharField = models.CharField(max_length=20)
    name: models.CharField = models.CharField(max_length=120)
    kind: models.CharField = models.CharField(
        max_length=1,
        choices=StateKind.choices,
        default=StateKind.NORMAL,
    )
    public_step: models.PositiveSmallIntegerField = models.PositiveSmallIntegerField(
        null=True,
        blank=True,
    )

    class Meta:
        db_table = "workflow_states"
        ordering = ["code"]
        constraints = [
            models.UniqueConstraint(
                fields=["process", "code"],
                name="workflow_state_code_uniq",
            ),
            models.UniqueConstraint(
                fields=["process"],
                condition=models.Q(kind=StateKind.INITIAL),
                name="workflow_single_initial_state",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.process_id}:{self.code}"


class Transition(BaseModel):
    process: models.ForeignKey = models.ForeignKey(
        "workflow.Process",
        on_delete=models.CASCADE,
        related_name="transitions",
    )
    code: models.CharField = models.CharField(max_length=60)
    name: models.CharField = models.CharField(max_length=120)
    from_state: models.ForeignKey = models.ForeignKey(
        "workflow.State",
        on_delete=models.PROTECT,
        related_name="outgoing_transitions",
    )
    to_state: models.ForeignKey = models.ForeignKey(
        "workflow.State",
        on_delete=models.PROTECT,
        related_name="incoming_transitions",
    )

    class Meta:
        db_table = "workflow_transitions"
        ordering = ["code"]
        constraints = [
            models.UniqueConstraint(
                fields=["process", "from_state", "to_state"],
                name="workflow_transition_edge_uniq",
            ),
        ]

    def __str__(self) -> str:
        return self.code
