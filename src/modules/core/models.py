"""Shared persistence building blocks.

- ``BaseModel``: UUIDv7 key plus created/updated timestamps, inherited by
  every workflow, cart, order and delivery table.
- ``OutboxEvent``: domain events waiting to be relayed off the request
  path (orders and deliveries write them next to the rows they describe).

UUIDv7 keys sort by creation time, so ``-id`` breaks ties between history
or tracking rows stamped within the same clock tick.
"""

from __future__ import annotations

from typing import List

import uuid6
from django.db import models
from django.utils import timezone


class BaseModel(models.Model):
    id = models.UUIDField(
        primary_key=True,
        default=uuid6.uuid7,
        editable=False,
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True

    def save(self, *args, **kwargs) -> None:
        # auto_now is skipped when update_fields omits it
        update_fields = kwargs.get("update_fields")
        if update_fields is not None and "updated_at" not in update_fields:
            kwargs["update_fields"] = [*update_fields, "updated_at"]
        super().save(*args, **kwargs)


class EventStatus(models.TextChoices):
    PENDING = "PENDING", "Pending"
    PUBLISHED = "PUBLISHED", "Published"
    FAILED = "FAILED", "Failed"


class OutboxEventQuerySet(models.QuerySet):
    def next_batch(self, size: int) -> List["OutboxEvent"]:
        """Oldest pending rows, locked so concurrent relays skip nothing twice."""
        return list(
            self.select_for_update()
            .filter(status=EventStatus.PENDING)
            .order_by("created_at", "id")[:size]
        )


class OutboxEvent(BaseModel):
    """A domain event committed atomically with the aggregate that raised it.

    ``topic`` names the aggregate family (``orders``, ``delivery``) and
    ``payload`` is the JSON form of the event dataclass, enough for
    ``DomainEvent.from_payload`` to rebuild it in the relay worker.
    A row leaves ``PENDING`` exactly once: published, or failed with the
    reason kept in ``error_message``.
    """

    event_type = models.CharField(max_length=100)
    payload = models.JSONField()
    aggregate_id = models.CharField(max_length=255)
    topic = models.CharField(max_length=100)
    status = models.CharField(
        max_length=20,
        choices=EventStatus.choices,
        default=EventStatus.PENDING,
    )
    processed_at = models.DateTimeField(null=True, blank=True, default=None)
    error_message = models.TextField(null=True, blank=True, default=None)  # noqa: DJ01
    retry_count = models.PositiveIntegerField(default=0)

    objects = OutboxEventQuerySet.as_manager()

    class Meta:
        db_table = "outbox_events"
        ordering = ["created_at"]
        indexes = [
            models.Index(fields=["event_type"], name="outbox_event_type_idx"),
            models.Index(fields=["aggregate_id"], name="outbox_aggregate_id_idx"),
            models.Index(
                fields=["status", "created_at"],
                name="outbox_status_created_idx",
            ),
        ]

    def mark_as_published(self) -> None:
        self.status = EventStatus.PUBLISHED
        self.processed_at = timezone.now()
        self.save(update_fields=["status", "processed_at"])

    def mark_as_failed(self, error: str) -> None:
        """Park the row; ``retry_count`` counts relay attempts that failed."""
        self.status = EventStatus.FAILED
        self.error_message = error
        self.processed_at = timezone.now()
        self.retry_count += 1
        self.save(
            update_fields=["status", "error_message", "processed_at", "retry_count"]
        )

    def __str__(self) -> str:
        return f"{self.topic}:{self.event_type} [{self.status}] ({self.aggregate_id})"
