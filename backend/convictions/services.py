"""
Convictions app Service Layer.

This module owns every workflow that mutates a custody record.  Views are
thin wrappers that delegate here.

Architecture
------------
- ``ConvictionQueryService``   — Sentence event selection (pure).
- ``CustodyKeyDateService``    — Key-date add-or-replace.
- ``CustodyUpdateService``     — Prison location transfer pipeline.
- ``BookingNumberService``     — Booking number assignment.
- ``CustodyQueryService``      — Custody reads for the API.

Transactions and side effects
-----------------------------
Each public operation runs its mutations in a single
``transaction.atomic()`` block (``run_in_atomic``), multi-event batches
included.  Downstream notifications are queued with
``transaction.on_commit`` by ``core.domain.notifications``; telemetry is
collected while the unit of work runs and emitted only once it has
committed (or failed), so a rolled back update never reports success.

Prison location pipeline
------------------------
::

    NOMS number
      │  OffenderQueryService.get_most_likely_by_noms_number
      ▼  ─── OffenderNotFound / MultipleOffendersFound
    active custodial events
      │  ─── ConvictionNotFound / MultipleCustodialSentences
      ▼
    in custody or about to enter
      │  ─── CustodialSentenceNotFoundInCorrectState
      ▼
    institution by code
      │  ─── TransferPrisonNotFound
      ▼
    events at another institution ── none ──▶ NoUpdateRequired
      │
      ▼
    move, history, notify, POM, contact ──▶ Updated
"""

from __future__ import annotations

import datetime
import logging
from typing import Any

from django.db.models import QuerySet
from django.utils import timezone

from core.constants import CUSTODY_STATUS_CHANGE_DETAIL
from core.domain.exceptions import DomainError, NotFound
from core.domain.features import FeatureSwitches
from core.domain.notifications import IapsNotificationService, SpgNotificationService
from core.domain.results import CustodyUpdate, Failure, Outcome, Reason, Result, Success
from core.domain.telemetry import TelemetryClient
from core.domain.transactions import run_in_atomic
from core.models import Institution
from core.services import ReferenceDataService
from contacts.services import ContactService
from offenders.models import Offender
from offenders.services import (
    OffenderManagerService,
    OffenderPrisonerService,
    OffenderQueryService,
)

from .models import Custody, CustodyHistory, Event, KeyDate

logger = logging.getLogger(__name__)

# Telemetry is collected as (name, properties) pairs and emitted after commit.
TelemetryRecord = tuple[str, dict[str, Any]]


def _emit(records: list[TelemetryRecord]) -> None:
    for name, properties in records:
        TelemetryClient.track_event(name, properties)


def _auditing_user(requesting_user: Any) -> Any:
    """Return the user to stamp on audit columns, or ``None``."""
    if requesting_user is None or not getattr(requesting_user, "is_authenticated", False):
        return None
    return requesting_user


# ═══════════════════════════════════════════════════════════════════
#  Conviction Query Service
# ═══════════════════════════════════════════════════════════════════


class ConvictionQueryService:
    """Sentence event selection.  No side effects."""

    @staticmethod
    def _active_custodial_queryset(offender: Offender) -> QuerySet:
        return (
            Event.objects.filter(offender=offender)
            .active()
            .with_custody()
            .prefetch_related("custody__key_dates__key_date_type")
            .order_by("event_number", "pk")
        )

    @classmethod
    def get_active_custodial_events(cls, offender: Offender) -> list[Event]:
        """Active, non-terminated events of ``offender`` that have a custody."""
        return list(cls._active_custodial_queryset(offender))

    @staticmethod
    def get_event_for_offender(offender: Offender, conviction_id: int) -> Event | None:
        """
        The event with primary key ``conviction_id`` if it belongs to
        ``offender``.  Inactive events are returned too.
        """
        return (
            Event.objects.filter(pk=conviction_id, offender=offender, soft_deleted=False)
            .select_related("offender")
            .first()
        )

    @classmethod
    def get_active_custodial_events_by_booking_number(
        cls, offender: Offender, booking_number: str,
    ) -> list[Event]:
        return list(
            cls._active_custodial_queryset(offender).filter(custody__prisoner_number=booking_number)
        )

    @classmethod
    def get_active_custodial_events_closest_to(
        cls,
        offender: Offender,
        sentence_start_date: datetime.date,
        tolerance_days: int | None = None,
    ) -> list[Event]:
        """
        Active custodial events whose sentence start date is within
        ``tolerance_days`` of ``sentence_start_date``, keeping only those at
        the smallest distance.  More than one result means the match is
        ambiguous.
        """
        if tolerance_days is None:
            tolerance_days = ReferenceDataService.sentence_start_date_tolerance_days()
        window = datetime.timedelta(days=tolerance_days)
        candidates = cls._active_custodial_queryset(offender).filter(
            sentence_start_date__gte=sentence_start_date - window,
            sentence_start_date__lte=sentence_start_date + window,
        )
        by_distance: dict[int, list[Event]] = {}
        for event in candidates:
            distance = abs((event.sentence_start_date - sentence_start_date).days)
            by_distance.setdefault(distance, []).append(event)
        if not by_distance:
            return []
        return by_distance[min(by_distance)]


# ═══════════════════════════════════════════════════════════════════
#  Custody Key Date Service
# ═══════════════════════════════════════════════════════════════════


class CustodyKeyDateService:
    """
    Add-or-replace of typed key dates on custody records.

    A key date type is unique per custody, so adding a type that already
    exists replaces its date: the creation stamp is kept and only the
    date and the last-updated stamp change.  Every touched custody gets:

    * an SPG ``KEY_DATE_CREATED`` or ``KEY_DATE_UPDATED`` notification;
    * an IAPS ``EVENT_UPDATED`` notification when the type affects the
      sentence expiry;
    * a ``KeyDateAdded`` or ``KeyDateUpdated`` telemetry event.

    All entry points return the key date stored on the first custody
    processed.
    """

    @staticmethod
    def _invalid_type_code(type_code: str) -> Failure:
        return Failure(
            Reason.INVALID_TYPE_CODE,
            f"{type_code} is not a valid custody key date",
        )

    @classmethod
    def add_or_replace_by_conviction_id(
        cls,
        offender_id: int,
        conviction_id: int,
        type_code: str,
        date: datetime.date,
        requesting_user: Any = None,
    ) -> Result[KeyDate]:
        """Add or replace a key date on one conviction, active or not."""

        def targets(offender: Offender) -> Result[list[Event]]:
            event = ConvictionQueryService.get_event_for_offender(offender, conviction_id)
            if event is None or not hasattr(event, "custody") or event.custody.soft_deleted:
                return Failure(
                    Reason.CONVICTION_NOT_FOUND,
                    f"conviction with convictionId {conviction_id} not found",
                )
            return Success([event])

        return cls._add_or_replace(
            OffenderQueryService.get_by_id(offender_id), targets, type_code, date, requesting_user,
        )

    @classmethod
    def add_or_replace_by_offender_id(
        cls,
        offender_id: int,
        type_code: str,
        date: datetime.date,
        requesting_user: Any = None,
    ) -> Result[KeyDate]:
        """Add or replace a key date on every active custodial event."""
        return cls._add_or_replace(
            OffenderQueryService.get_by_id(offender_id),
            cls._active_custodial_targets,
            type_code,
            date,
            requesting_user,
        )

    @classmethod
    def add_or_replace_by_noms_number(
        cls,
        noms_number: str,
        type_code: str,
        date: datetime.date,
        requesting_user: Any = None,
    ) -> Result[KeyDate]:
        """As ``add_or_replace_by_offender_id`` for the most likely NOMS match."""
        return cls._add_or_replace(
            OffenderQueryService.get_most_likely_by_noms_number(noms_number),
            cls._active_custodial_targets,
            type_code,
            date,
            requesting_user,
        )

    @staticmethod
    def _active_custodial_targets(offender: Offender) -> Result[list[Event]]:
        events = ConvictionQueryService.get_active_custodial_events(offender)
        if not events:
            return Failure(
                Reason.NO_ACTIVE_CUSTODIAL_SENTENCE,
                f"No active custodial event found for offender {offender.crn}",
            )
        if len(events) > 1 and not FeatureSwitches.multi_event_key_date_update_enabled():
            return Failure(
                Reason.NO_ACTIVE_CUSTODIAL_SENTENCE,
                f"Expected offender {offender.crn} to have a single active custodial event "
                f"but found {len(events)}",
            )
        return Success(events)

    @classmethod
    def _add_or_replace(
        cls,
        offender_result: Result[Offender],
        select_targets,
        type_code: str,
        date: datetime.date,
        requesting_user: Any,
    ) -> Result[KeyDate]:
        if offender_result.is_failure:
            return offender_result
        key_date_type = ReferenceDataService.get_key_date_type(type_code)
        if key_date_type is None:
            return cls._invalid_type_code(type_code)

        targets = select_targets(offender_result.value)
        if targets.is_failure:
            logger.info("Key date %s not applied: %s", type_code, targets.message)
            return targets

        telemetry: list[TelemetryRecord] = []
        key_dates = run_in_atomic(
            cls._apply,
            targets.value,
            key_date_type,
            date,
            _auditing_user(requesting_user),
            telemetry,
        )
        _emit(telemetry)
        return Success(key_dates[0])

    @staticmethod
    def _apply(events, key_date_type, date, user, telemetry: list[TelemetryRecord]) -> list[KeyDate]:
        type_code = key_date_type.code_value
        expiry_affected = ReferenceDataService.is_expiry_affecting(type_code)
        stored: list[KeyDate] = []
        for event in events:
            custody = event.custody
            now = timezone.now()
            key_date = custody.find_key_date(type_code)
            if key_date is not None:
                key_date.key_date = date
                key_date.last_updated_datetime = now
                key_date.last_updated_by = user
                key_date.save(update_fields=["key_date", "last_updated_datetime", "last_updated_by"])
                SpgNotificationService.notify_update_of_key_date(type_code, event)
                telemetry_name = "KeyDateUpdated"
            else:
                key_date = KeyDate.objects.create(
                    custody=custody,
                    key_date_type=key_date_type,
                    key_date=date,
                    created_datetime=now,
                    created_by=user,
                    last_updated_datetime=now,
                    last_updated_by=user,
                )
                SpgNotificationService.notify_new_key_date(type_code, event)
                telemetry_name = "KeyDateAdded"

            event.save(update_fields=["updated_at"])
            if expiry_affected:
                IapsNotificationService.notify_event_updated(event)

            telemetry.append((telemetry_name, {
                "offenderId": event.offender_id,
                "eventId": event.pk,
                "eventNumber": event.event_number,
                "date": date.isoformat(),
                "type": type_code,
            }))
            logger.info(
                "%s key date %s=%s on event %s", telemetry_name, type_code, date, event.pk,
            )
            stored.append(key_date)
        return stored


# ═══════════════════════════════════════════════════════════════════
#  Custody Update Service (prison location)
# ═══════════════════════════════════════════════════════════════════


# Failure reason → telemetry event name, per entry point.
_P2P_TRANSFER_FAILURE_EVENTS = {
    Reason.TRANSFER_PRISON_NOT_FOUND: "P2PTransferPrisonNotFound",
    Reason.CUSTODIAL_SENTENCE_NOT_FOUND_IN_CORRECT_STATE: "P2PTransferPrisonUpdateIgnored",
    Reason.CONVICTION_NOT_FOUND: "P2PTransferBookingNumberNotFound",
    Reason.MULTIPLE_CUSTODIAL_SENTENCES: "P2PTransferBookingNumberHasDuplicates",
    Reason.OFFENDER_NOT_FOUND: "P2PTransferOffenderNotFound",
    Reason.MULTIPLE_OFFENDERS_FOUND: "P2PTransferMultipleOffendersFound",
}

_POM_LOCATION_FAILURE_EVENTS = {
    Reason.TRANSFER_PRISON_NOT_FOUND: "POMLocationPrisonNotFound",
    Reason.CUSTODIAL_SENTENCE_NOT_FOUND_IN_CORRECT_STATE: "POMLocationCustodialStatusNotCorrect",
    Reason.CONVICTION_NOT_FOUND: "POMLocationNoEvents",
    Reason.MULTIPLE_CUSTODIAL_SENTENCES: "POMLocationMultipleEvents",
    Reason.OFFENDER_NOT_FOUND: "POMLocationOffenderNotFound",
    Reason.MULTIPLE_OFFENDERS_FOUND: "POMLocationMultipleOffenders",
}


class CustodyUpdateService:
    """
    Prison-to-prison transfer reconciliation.

    Two entry points share one pipeline:

    * ``update_prison_location`` — API; raises ``NotFound`` on failure and
      returns the updated custody with the latest sentence start date.
    * ``sync_prison_location`` — fire-and-forget from the prison event
      listener; never raises for domain conditions.

    When ``FeatureSwitches.custody_update_enabled()`` is off the pipeline
    still classifies the request, but nothing is written.
    """

    # ── Entry points ─────────────────────────────────────────────────

    @classmethod
    def update_prison_location(
        cls,
        noms_number: str,
        booking_number: str,
        institution_code: str,
        requesting_user: Any = None,
    ) -> Custody:
        properties = {
            "offenderNo": noms_number,
            "bookingNumber": booking_number,
            "toAgency": institution_code,
        }
        result = run_in_atomic(cls._update_prison_location, noms_number, institution_code, requesting_user)

        if result.is_failure:
            TelemetryClient.track_event(_P2P_TRANSFER_FAILURE_EVENTS[result.reason], properties)
            raise NotFound(result.message)

        update = result.value
        if update.outcome == Outcome.UPDATED:
            TelemetryClient.track_event(
                "P2PTransferPrisonUpdated",
                {**properties, "updatedCount": len(update.custodies)},
            )
        else:
            TelemetryClient.track_event("P2PTransferPrisonUpdateIgnored", properties)
        return max(
            update.custodies,
            key=lambda custody: custody.event.sentence_start_date or datetime.date.min,
        )

    @classmethod
    def sync_prison_location(
        cls,
        noms_number: str,
        institution_code: str,
    ) -> Result[CustodyUpdate]:
        properties: dict[str, Any] = {"offenderNo": noms_number, "toAgency": institution_code}
        result = run_in_atomic(cls._update_prison_location, noms_number, institution_code)

        def on_failure(failure: Failure) -> str:
            logger.info("Prison location for %s not updated: %s", noms_number, failure.message)
            return _POM_LOCATION_FAILURE_EVENTS[failure.reason]

        def on_success(update: CustodyUpdate) -> str:
            if update.outcome == Outcome.UPDATED:
                properties["updatedCount"] = len(update.custodies)
                return "POMLocationUpdated"
            return "POMLocationCorrect"

        TelemetryClient.track_event(result.fold(on_failure, on_success), properties)
        return result

    # ── Pipeline ─────────────────────────────────────────────────────

    @classmethod
    def _update_prison_location(
        cls,
        noms_number: str,
        institution_code: str,
        requesting_user: Any = None,
    ) -> Result[CustodyUpdate]:
        user = _auditing_user(requesting_user)
        return OffenderQueryService.get_most_likely_by_noms_number(noms_number).flat_map(
            lambda offender: cls._active_custodial_events(offender)
            .flat_map(cls._in_custody_or_about_to_enter)
            .flat_map(
                lambda events: cls._find_institution(institution_code).flat_map(
                    lambda institution: cls._update_when_different(offender, events, institution, user)
                )
            )
        )

    @staticmethod
    def _active_custodial_events(offender: Offender) -> Result[list[Event]]:
        events = ConvictionQueryService.get_active_custodial_events(offender)
        if not events:
            return Failure(
                Reason.CONVICTION_NOT_FOUND,
                f"No active custodial events found for offender {offender.crn}",
            )
        if len(events) > 1 and not FeatureSwitches.multi_event_location_update_enabled():
            return Failure(
                Reason.MULTIPLE_CUSTODIAL_SENTENCES,
                f"Multiple active custodial events found for offender {offender.crn}. {len(events)} found",
            )
        return Success(events)

    @staticmethod
    def _in_custody_or_about_to_enter(events: list[Event]) -> Result[list[Event]]:
        eligible = [
            event for event in events
            if event.custody.is_in_custody() or event.custody.is_about_to_enter_custody()
        ]
        if eligible:
            return Success(eligible)
        statuses = ", ".join(
            event.custody.get_custodial_status_display() if event.custody.custodial_status else "none"
            for event in events
        )
        return Failure(
            Reason.CUSTODIAL_SENTENCE_NOT_FOUND_IN_CORRECT_STATE,
            f"conviction with custodial status of In Custody or Sentenced Custody not found. Status was {statuses}",
        )

    @staticmethod
    def _find_institution(institution_code: str) -> Result[Institution]:
        institution = ReferenceDataService.get_institution_by_code(institution_code)
        if institution is None:
            return Failure(
                Reason.TRANSFER_PRISON_NOT_FOUND,
                f"prison institution with nomis code {institution_code} not found",
            )
        return Success(institution)

    @classmethod
    def _update_when_different(
        cls,
        offender: Offender,
        events: list[Event],
        institution: Institution,
        user: Any,
    ) -> Result[CustodyUpdate]:
        to_move = [event for event in events if event.custody.institution_id != institution.pk]
        if not to_move:
            return Success(CustodyUpdate.no_update_required([event.custody for event in events]))

        if FeatureSwitches.custody_update_enabled():
            for event in to_move:
                cls._move_to_institution(offender, event, institution, user)
        else:
            logger.warning("Update institution will be ignored, this feature is switched off")
        return Success(CustodyUpdate.updated([event.custody for event in to_move]))

    @staticmethod
    def _move_to_institution(offender: Offender, event: Event, institution: Institution, user: Any) -> None:
        custody = event.custody
        today = timezone.localdate()

        custody.institution = institution
        custody.location_change_date = today
        CustodyHistory.objects.create(
            custody=custody,
            offender=offender,
            custody_event_type=ReferenceDataService.get_prison_location_change_event_type(),
            detail=institution.description,
            when=today,
        )
        if custody.is_about_to_enter_custody():
            custody.status_change_date = today
            custody.custodial_status = ReferenceDataService.get_in_custody_status()
            CustodyHistory.objects.create(
                custody=custody,
                offender=offender,
                custody_event_type=ReferenceDataService.get_custody_status_change_event_type(),
                detail=CUSTODY_STATUS_CHANGE_DETAIL,
                when=today,
            )
        custody.save()

        SpgNotificationService.notify_custody_location_change(event)
        SpgNotificationService.notify_custody_update(event)
        if not OffenderManagerService.is_manager_at_institution(offender, institution):
            OffenderManagerService.auto_allocate_manager_at_institution(offender, institution)
        ContactService.add_contact_for_prison_location_change(offender, event, user)

        logger.info(
            "Moved custody of event %s for offender %s to %s",
            event.pk,
            offender.crn,
            institution.code,
        )


# ═══════════════════════════════════════════════════════════════════
#  Booking Number Service
# ═══════════════════════════════════════════════════════════════════


_BOOKING_NUMBER_FAILURE_EVENTS = {
    Reason.OFFENDER_NOT_FOUND: "P2PImprisonmentStatusOffenderNotFound",
    Reason.MULTIPLE_OFFENDERS_FOUND: "P2PImprisonmentStatusMultipleOffendersFound",
    Reason.CONVICTION_NOT_FOUND: "P2PImprisonmentStatusCustodyEventNotFound",
    Reason.MULTIPLE_CUSTODIAL_SENTENCES: "P2PImprisonmentStatusCustodyEventsHasDuplicates",
}


class BookingNumberService:
    """Assigns the prison booking number to the matching custodial sentence."""

    @classmethod
    def update_booking_number(
        cls,
        noms_number: str,
        booking_number: str,
        sentence_start_date: datetime.date,
        requesting_user: Any = None,
    ) -> Custody:
        """
        Set ``booking_number`` on the active custodial event whose sentence
        started closest to ``sentence_start_date``.

        Raises:
            NotFound: no single offender, or no single matching event.
        """
        properties = {
            "offenderNo": noms_number,
            "bookingNumber": booking_number,
            "sentenceStartDate": sentence_start_date.isoformat(),
        }
        result = run_in_atomic(
            cls._update_booking_number,
            noms_number,
            booking_number,
            sentence_start_date,
            _auditing_user(requesting_user),
        )
        if result.is_failure:
            TelemetryClient.track_event(_BOOKING_NUMBER_FAILURE_EVENTS[result.reason], properties)
            raise NotFound(result.message)

        custody, telemetry_name = result.value
        TelemetryClient.track_event(telemetry_name, properties)
        return custody

    @classmethod
    def _update_booking_number(
        cls,
        noms_number: str,
        booking_number: str,
        sentence_start_date: datetime.date,
        user: Any,
    ) -> Result[tuple[Custody, str]]:
        return OffenderQueryService.get_single_by_noms_number(noms_number).flat_map(
            lambda offender: cls._closest_event(offender, sentence_start_date).map(
                lambda event: cls._assign(offender, event, booking_number, user)
            )
        )

    @staticmethod
    def _closest_event(offender: Offender, sentence_start_date: datetime.date) -> Result[Event]:
        events = ConvictionQueryService.get_active_custodial_events_closest_to(offender, sentence_start_date)
        if not events:
            return Failure(
                Reason.CONVICTION_NOT_FOUND,
                f"conviction with sentence date close to {sentence_start_date.isoformat()} not found",
            )
        if len(events) > 1:
            return Failure(
                Reason.MULTIPLE_CUSTODIAL_SENTENCES,
                f"no single conviction with sentence date around {sentence_start_date.isoformat()} found, "
                f"instead {len(events)} duplicates found",
            )
        return Success(events[0])

    @staticmethod
    def _assign(offender: Offender, event: Event, booking_number: str, user: Any) -> tuple[Custody, str]:
        custody = event.custody
        existing = custody.prisoner_number
        if existing == booking_number:
            return custody, "P2PImprisonmentStatusBookingNumberAlreadySet"

        telemetry_name = (
            "P2PImprisonmentStatusBookingNumberUpdated" if existing.strip()
            else "P2PImprisonmentStatusBookingNumberInserted"
        )
        if FeatureSwitches.booking_number_update_enabled():
            custody.prisoner_number = booking_number
            custody.save(update_fields=["prisoner_number", "updated_at"])
            OffenderPrisonerService.refresh_offender_prisoners_for(offender)
            SpgNotificationService.notify_custody_update(event)
            ContactService.add_contact_for_booking_number_update(offender, event, user)
            logger.info("Booking number of event %s set to %s", event.pk, booking_number)
        else:
            logger.warning("Update booking number will be ignored, this feature is switched off")
        return custody, telemetry_name


# ═══════════════════════════════════════════════════════════════════
#  Custody Query Service
# ═══════════════════════════════════════════════════════════════════


class CustodyQueryService:
    """Read-only custody lookups used by the API."""

    @staticmethod
    def get_custody_by_booking_number(noms_number: str, booking_number: str) -> Custody:
        offender = OffenderQueryService.get_single_by_noms_number(noms_number).unwrap()
        events = ConvictionQueryService.get_active_custodial_events_by_booking_number(offender, booking_number)
        if not events:
            raise NotFound(f"conviction with bookNumber {booking_number} not found")
        if len(events) > 1:
            raise NotFound(
                f"no single conviction with bookingNumber {booking_number} found, "
                f"instead {len(events)} duplicates found"
            )
        return events[0].custody

    @staticmethod
    def get_custody_by_conviction_id(crn: str, conviction_id: int) -> Custody:
        offender = OffenderQueryService.get_by_crn(crn).unwrap()
        event = ConvictionQueryService.get_event_for_offender(offender, conviction_id)
        if event is None:
            raise NotFound(f"conviction with convictionId {conviction_id} not found")
        custody = Custody.objects.filter(event=event, soft_deleted=False).select_related(
            "event", "institution",
        ).first()
        if custody is None:
            raise DomainError(f"The conviction with convictionId {conviction_id} is not a custodial sentence")
        return custody
