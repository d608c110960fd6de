"""Celery tasks of the core module."""

from __future__ import annotations

import structlog
from celery import shared_task
from django.db import transaction

from modules.core.models import OutboxEvent
from shared.infrastructure.bus import event_bus

logger = structlog.get_logger(__name__)

RELAY_BATCH_SIZE = 100


@shared_task(name="core.relay_outbox_events")
def relay_outbox_events(batch_size: int = RELAY_BATCH_SIZE) -> dict:
    """Publish pending outbox rows to the in-process event bus.

    Rows are locked (``SELECT FOR UPDATE``) so two workers never relay
    the same event.  An event type with no subscriber is marked failed.
    """
    published = 0
    failed = 0
    with transaction.atomic():
        pending = OutboxEvent.objects.next_batch(batch_size)
        for outbox_event in pending:
            log = logger.bind(
                outbox_id=str(outbox_event.id),
                event_type=outbox_event.event_type,
            )
            event_class = event_bus.event_class_for(outbox_event.event_type)
            if event_class is None:
                outbox_event.mark_as_failed(
                    f"No subscriber for {outbox_event.event_type}."
                )
                log.warning("outbox.unroutable")
                failed += 1
                continue
            try:
                event_bus.publish(event_class.from_payload(outbox_event.payload))
            except (KeyError, TypeError, ValueError) as exc:
                outbox_event.mark_as_failed(str(exc))
                log.warning("outbox.publish_failed", error=str(exc))
                failed += 1
                continue
            outbox_event.mark_as_published()
            published += 1

    logger.info("outbox.relay_finished", published=published, failed=failed)
    return {"published": published, "failed": failed}
