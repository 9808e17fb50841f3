"""Background tasks for the core module."""

from __future__ import annotations

from typing import Dict

import structlog
from celery import shared_task
from django.conf import settings

from modules.core.models import OutboxEvent
from shared.domain.events import DomainEvent
from shared.infrastructure.bus import event_bus

logger = structlog.get_logger(__name__)


@shared_task(name="core.relay_outbox_events")
def relay_outbox_events(batch_size: int = 100) -> Dict[str, int]:
    """Publish pending outbox events on the in-process event bus.

    Each row is handled independently: a handler failure marks that row
    ``FAILED`` (retried on later runs until ``OUTBOX_MAX_RETRIES``) and the
    relay moves on to the next one.
    """
    published = failed = 0
    batch = list(
        OutboxEvent.objects.ready_for_relay(settings.OUTBOX_MAX_RETRIES)[:batch_size]
    )

    for outbox_event in batch:
        log = logger.bind(
            outbox_id=str(outbox_event.id),
            event_type=outbox_event.event_type,
            aggregate_id=outbox_event.aggregate_id,
        )
        try:
            event = DomainEvent.from_payload(
                outbox_event.event_type, outbox_event.payload
            )
            event_bus.publish(event)
        except Exception as exc:
            log.exception("outbox.relay_failed")
            outbox_event.mark_as_failed(f"{type(exc).__name__}: {exc}")
            failed += 1
            continue

        outbox_event.mark_as_published()
        log.info("outbox.relayed")
        published += 1

    logger.info("outbox.relay_completed", published=published, failed=failed)
    return {"published": published, "failed": failed}
