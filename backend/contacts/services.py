"""
Contacts app Service Layer.

``ContactService`` is the contact recorder used by the custody workflows.
Both methods run inside the caller's transaction: the contact commits
together with the custody change it documents.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from django.utils import timezone

from core.constants import BOOKING_NUMBER_UPDATE_CONTACT, PRISON_LOCATION_CHANGE_CONTACT
from core.services import ReferenceDataService

from .models import Contact

if TYPE_CHECKING:
    from convictions.models import Event
    from offenders.models import Offender

logger = logging.getLogger(__name__)


class ContactService:
    """Stateless helper writing case-diary contacts."""

    @staticmethod
    def _add_contact(
        offender: Offender,
        event: Event,
        contact_type_code: str,
        notes: str,
        requesting_user: Any = None,
    ) -> Contact:
        contact = Contact.objects.create(
            offender=offender,
            event=event,
            contact_type=ReferenceDataService.get_contact_type(contact_type_code),
            contact_date=timezone.localdate(),
            notes=notes,
            staff_code=getattr(requesting_user, "staff_code", "") or "",
            created_by=requesting_user,
        )
        logger.info(
            "Added %s contact for offender %s event %s",
            contact_type_code,
            offender.crn,
            event.event_number,
        )
        return contact

    @classmethod
    def add_contact_for_prison_location_change(
        cls,
        offender: Offender,
        event: Event,
        requesting_user: Any = None,
    ) -> Contact:
        institution = event.custody.institution
        notes = f"Custodial Establishment: {institution.description if institution else ''}"
        return cls._add_contact(offender, event, PRISON_LOCATION_CHANGE_CONTACT, notes, requesting_user)

    @classmethod
    def add_contact_for_booking_number_update(
        cls,
        offender: Offender,
        event: Event,
        requesting_user: Any = None,
    ) -> Contact:
        notes = f"Prison Number: {event.custody.prisoner_number}"
        return cls._add_contact(offender, event, BOOKING_NUMBER_UPDATE_CONTACT, notes, requesting_user)
