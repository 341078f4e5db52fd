"""
Core app services — **Reference data lookups**.

Every app resolves reference codes and institutions through
``ReferenceDataService`` rather than querying ``StandardReference`` or
``Institution`` directly, so that the set names and the configured
overrides (``settings.EXPIRY_AFFECTING_KEY_DATE_CODES``,
``settings.SENTENCE_START_DATE_TOLERANCE_DAYS``) are applied in one place.
"""

from __future__ import annotations

from django.conf import settings

from core.constants import (
    CONTACT_TYPE_SET,
    CUSTODY_EVENT_TYPE_SET,
    CUSTODY_STATUS_CHANGE_EVENT,
    EXPIRY_AFFECTING_KEY_DATE_CODES,
    KEY_DATE_TYPE_SET,
    PRISON_LOCATION_CHANGE_EVENT,
    SENTENCE_START_DATE_TOLERANCE_DAYS,
)

from .models import Institution, StandardReference


class ReferenceDataService:
    """
    Stateless lookups over the reference tables.

    Lookups for codes the caller supplies (key-date types, institution
    codes) return ``None`` when unknown so the caller can report a precise
    failure.  Lookups for codes the system itself relies on (custody event
    types, contact types) raise ``StandardReference.DoesNotExist`` — a
    missing seed row is a deployment error, not a domain condition.
    """

    @staticmethod
    def _lookup(set_name: str, code: str) -> StandardReference | None:
        return StandardReference.objects.filter(
            set_name=set_name, code_value=code, active=True,
        ).first()

    @classmethod
    def get_key_date_type(cls, code: str) -> StandardReference | None:
        return cls._lookup(KEY_DATE_TYPE_SET, code)

    @staticmethod
    def get_custody_event_type(code: str) -> StandardReference:
        return StandardReference.objects.get(set_name=CUSTODY_EVENT_TYPE_SET, code_value=code)

    @classmethod
    def get_prison_location_change_event_type(cls) -> StandardReference:
        return cls.get_custody_event_type(PRISON_LOCATION_CHANGE_EVENT)

    @classmethod
    def get_custody_status_change_event_type(cls) -> StandardReference:
        return cls.get_custody_event_type(CUSTODY_STATUS_CHANGE_EVENT)

    @staticmethod
    def get_contact_type(code: str) -> StandardReference:
        return StandardReference.objects.get(set_name=CONTACT_TYPE_SET, code_value=code)

    @staticmethod
    def get_institution_by_code(code: str) -> Institution | None:
        return Institution.objects.filter(code=code).first()

    @staticmethod
    def is_expiry_affecting(key_date_code: str) -> bool:
        codes = getattr(settings, "EXPIRY_AFFECTING_KEY_DATE_CODES", EXPIRY_AFFECTING_KEY_DATE_CODES)
        return key_date_code in codes

    @staticmethod
    def sentence_start_date_tolerance_days() -> int:
        return getattr(settings, "SENTENCE_START_DATE_TOLERANCE_DAYS", SENTENCE_START_DATE_TOLERANCE_DAYS)

    @staticmethod
    def get_in_custody_status() -> str:
        from convictions.models import CustodialStatus  # avoids a circular import

        return CustodialStatus.IN_CUSTODY
