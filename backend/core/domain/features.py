"""
core.domain.features — Read-only feature switches.

Switches live in ``settings.FEATURE_SWITCHES`` (populated from environment
variables in ``backend/settings.py``) and are read on every access so that
``override_settings`` in tests and a settings reload both take effect
without restarting services.

Switch keys
-----------
CUSTODY_UPDATE               Write institution/status changes on transfer.
BOOKING_NUMBER_UPDATE        Write booking numbers (and their side effects).
MULTI_EVENT_KEY_DATE_UPDATE  Allow key-date updates across several active
                             custodial events of one offender.
MULTI_EVENT_LOCATION_UPDATE  Allow prison-location updates across several
                             active custodial events of one offender.
"""

from __future__ import annotations

from django.conf import settings

CUSTODY_UPDATE = "CUSTODY_UPDATE"
BOOKING_NUMBER_UPDATE = "BOOKING_NUMBER_UPDATE"
MULTI_EVENT_KEY_DATE_UPDATE = "MULTI_EVENT_KEY_DATE_UPDATE"
MULTI_EVENT_LOCATION_UPDATE = "MULTI_EVENT_LOCATION_UPDATE"


class FeatureSwitches:
    """Stateless accessors for the configured switches."""

    @staticmethod
    def is_enabled(name: str) -> bool:
        switches = getattr(settings, "FEATURE_SWITCHES", {})
        return bool(switches.get(name, False))

    @classmethod
    def custody_update_enabled(cls) -> bool:
        return cls.is_enabled(CUSTODY_UPDATE)

    @classmethod
    def booking_number_update_enabled(cls) -> bool:
        return cls.is_enabled(BOOKING_NUMBER_UPDATE)

    @classmethod
    def multi_event_key_date_update_enabled(cls) -> bool:
        return cls.is_enabled(MULTI_EVENT_KEY_DATE_UPDATE)

    @classmethod
    def multi_event_location_update_enabled(cls) -> bool:
        return cls.is_enabled(MULTI_EVENT_LOCATION_UPDATE)
