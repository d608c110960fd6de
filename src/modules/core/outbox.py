"""Writes collected domain events to the transactional outbox.

Called by repositories from inside their ``save`` so the outbox rows commit
(or roll back) together with the aggregate.
"""

from __future__ import annotations

import json
from dataclasses import asdict
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List
from uuid import UUID

from modules.core.models import OutboxEvent
from shared.domain.events import DomainEvent, DomainEventMixin


def flush_domain_events(entity: DomainEventMixin, topic: str) -> List[OutboxEvent]:
    events = entity.pull_domain_events()
    rows = [
        OutboxEvent.objects.create(
            event_type=event.event_name,
            aggregate_id=str(event.aggregate_id),
            payload=serialize_event_payload(event),
            topic=topic,
        )
        for event in events
    ]
    return rows


def serialize_event_payload(event: DomainEvent) -> Dict[str, Any]:
    data = asdict(event)
    normalized = _normalize_for_json(data)
    return json.loads(json.dumps(normalized))


def _normalize_for_json(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, list):
        return [_normalize_for_json(item) for item in value]
    if isinstance(value, dict):
        return {key: _normalize_for_json(val) for key, val in value.items()}
    if isinstance(value, UUID):
        return str(value)
    return value
