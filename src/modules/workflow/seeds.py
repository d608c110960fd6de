"""Seed data for the order lifecycle (process ``ORD``).

``seed_order_process`` is idempotent: rows are matched by code and only
missing ones are created, so it can run on every deploy.
"""

from __future__ import annotations

from typing import Optional

from django.conf import settings
from django.db import transaction

from modules.workflow.constants import OrderStateCode, StateKind, transition_code
from modules.workflow.models import Process, State, Transition

ORDER_STATES = (
    (OrderStateCode.CREATED, "Orden creada", StateKind.INITIAL, 1),
    (OrderStateCode.PROCESSING, "En proceso", StateKind.NORMAL, 2),
    (OrderStateCode.READY, "Lista para entrega", StateKind.NORMAL, 3),
    (OrderStateCode.DONE, "Entregada", StateKind.TERMINAL, 4),
)

ORDER_EDGES = (
    (OrderStateCode.CREATED, OrderStateCode.CREATED, "Creación de orden"),
    (OrderStateCode.CREATED, OrderStateCode.PROCESSING, "Iniciar producción"),
    (OrderStateCode.PROCESSING, OrderStateCode.PROCESSING, "Nota de producción"),
    (OrderStateCode.PROCESSING, OrderStateCode.READY, "Marcar lista"),
    (OrderStateCode.READY, OrderStateCode.READY, "Evento de entrega"),
    (OrderStateCode.READY, OrderStateCode.DONE, "Entregar"),
    (OrderStateCode.DONE, OrderStateCode.DONE, "Nota posterior"),
)


@transaction.atomic
def seed_order_process(process_code: Optional[str] = None) -> Process:
    code = process_code or settings.ORDER_PROCESS_CODE
    process, _ = Process.objects.get_or_create(
        code=code, defaults={"name": "Flujo de órdenes"}
    )

    states = {}
    for state_code, name, kind, step in ORDER_STATES:
        state, _ = State.objects.get_or_create(
            process=process,
            code=state_code,
            defaults={"name": name, "kind": kind, "public_step": step},
        )
        states[state_code] = state

    for from_code, to_code, name in ORDER_EDGES:
        Transition.objects.get_or_create(
            process=process,
            from_state=states[from_code],
            to_state=states[to_code],
            defaults={"code": transition_code(from_code, to_code), "name": name},
        )
    return process
