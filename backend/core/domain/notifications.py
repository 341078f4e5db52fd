"""
core.domain.notifications — Downstream feed notifications (outbox).

Centralises notification creation so every app uses one consistent
entry-point rather than directly constructing ``OutboundNotification``
rows.

Design decisions
----------------
* **After commit** — rows are written from a ``transaction.on_commit``
  callback, so a notification is only ever emitted for a change that was
  actually committed.  Outside an atomic block the callback runs
  immediately.
* **Failure isolated** — each callback catches and logs its own errors.
  A feed that cannot be written never rolls back, or reports as failed,
  the update that triggered it.
* **Generic relation** — the related object (normally a conviction
  ``Event``) is stored via the ``OutboundNotification`` model's
  ``GenericForeignKey``.

Usage::

    from core.domain.notifications import SpgNotificationService

    SpgNotificationService.notify_custody_update(event)
"""

from __future__ import annotations

import functools
import logging
from typing import TYPE_CHECKING, Any

from django.contrib.contenttypes.models import ContentType
from django.db import transaction

if TYPE_CHECKING:
    from convictions.models import Event

logger = logging.getLogger(__name__)

# ── Message types per feed ──────────────────────────────────────────
KEY_DATE_CREATED = "KEY_DATE_CREATED"
KEY_DATE_UPDATED = "KEY_DATE_UPDATED"
CUSTODY_UPDATED = "CUSTODY_UPDATED"
CUSTODY_LOCATION_CHANGED = "CUSTODY_LOCATION_CHANGED"
EVENT_UPDATED = "EVENT_UPDATED"


def _event_payload(event: Event, **extra: Any) -> dict[str, Any]:
    offender = event.offender
    payload = {
        "offenderId": offender.pk,
        "crn": offender.crn,
        "nomsNumber": offender.noms_number,
        "eventId": event.pk,
        "eventNumber": event.event_number,
    }
    payload.update(extra)
    return payload


def _persist(feed: str, message_type: str, content_type_id: int, object_id: int, payload: dict) -> None:
    from core.models import OutboundNotification  # avoids a circular import

    try:
        OutboundNotification.objects.create(
            feed=feed,
            message_type=message_type,
            payload=payload,
            content_type_id=content_type_id,
            object_id=object_id,
        )
    except Exception:  # noqa: BLE001
        logger.exception(
            "Failed to queue %s notification %s for object_id=%s",
            feed,
            message_type,
            object_id,
        )
        return

    logger.info("Queued %s notification %s for object_id=%s", feed, message_type, object_id)


class _FeedNotifier:
    """Shared enqueue logic; subclasses set ``feed``."""

    feed: str = ""

    @classmethod
    def _enqueue(cls, message_type: str, event: Event, payload: dict[str, Any]) -> None:
        content_type = ContentType.objects.get_for_model(event)
        transaction.on_commit(
            functools.partial(
                _persist, cls.feed, message_type, content_type.pk, event.pk, payload,
            )
        )


class SpgNotificationService(_FeedNotifier):
    """
    Notifications for the SPG feed.

    All methods are classmethods — no instance state is needed.
    """

    feed = "spg"

    @classmethod
    def notify_new_key_date(cls, type_code: str, event: Event) -> None:
        cls._enqueue(KEY_DATE_CREATED, event, _event_payload(event, keyDateType=type_code))

    @classmethod
    def notify_update_of_key_date(cls, type_code: str, event: Event) -> None:
        cls._enqueue(KEY_DATE_UPDATED, event, _event_payload(event, keyDateType=type_code))

    @classmethod
    def notify_custody_update(cls, event: Event) -> None:
        cls._enqueue(CUSTODY_UPDATED, event, _event_payload(event))

    @classmethod
    def notify_custody_location_change(cls, event: Event) -> None:
        institution = event.custody.institution
        cls._enqueue(
            CUSTODY_LOCATION_CHANGED,
            event,
            _event_payload(event, institutionCode=institution.code if institution else None),
        )


class IapsNotificationService(_FeedNotifier):
    """Notifications for IAPS; only sentence-expiry relevant changes are sent."""

    feed = "iaps"

    @classmethod
    def notify_event_updated(cls, event: Event) -> None:
        cls._enqueue(EVENT_UPDATED, event, _event_payload(event))
