"""
Tests for ``BookingNumberService`` and the custody read operations.
"""

from __future__ import annotations

import datetime
from unittest import mock

import pytest
from django.test import TestCase, override_settings

from contacts.models import Contact
from convictions.models import Custody, Event
from convictions.services import BookingNumberService, CustodyQueryService
from core.domain.exceptions import Conflict, DomainError, NotFound
from core.domain.telemetry import TelemetryClient
from core.models import OutboundNotification
from offenders.models import OffenderPrisoner
from tests.builders import make_custodial_event, make_offender, seed_reference_data

SENTENCE_START = datetime.date(2024, 1, 15)


@override_settings(FEATURE_SWITCHES={"BOOKING_NUMBER_UPDATE": True}, SENTENCE_START_DATE_TOLERANCE_DAYS=7)
class TestUpdateBookingNumber(TestCase):

    @classmethod
    def setUpTestData(cls):
        seed_reference_data()

    def setUp(self):
        self.offender = make_offender("G1234AB")
        patcher = mock.patch.object(TelemetryClient, "track_event")
        self.track_event = patcher.start()
        self.addCleanup(patcher.stop)

    def _update(self, booking_number: str = "38339A", start: datetime.date = SENTENCE_START):
        return BookingNumberService.update_booking_number("G1234AB", booking_number, start)

    def _telemetry_names(self) -> list[str]:
        return [call.args[0] for call in self.track_event.call_args_list]

    def test_inserts_booking_number(self):
        event = make_custodial_event(self.offender, sentence_start_date=SENTENCE_START)

        with self.captureOnCommitCallbacks(execute=True):
            custody = self._update()

        assert custody.prisoner_number == "38339A"
        assert Custody.objects.get(event=event).prisoner_number == "38339A"
        assert self._telemetry_names() == ["P2PImprisonmentStatusBookingNumberInserted"]
        assert list(OutboundNotification.objects.values_list("message_type", flat=True)) == ["CUSTODY_UPDATED"]
        contact = Contact.objects.get(offender=self.offender)
        assert contact.contact_type.code_value == "EDSS"
        assert contact.notes == "Prison Number: 38339A"

    def test_refreshes_prisoner_cross_reference(self):
        make_custodial_event(self.offender, sentence_start_date=SENTENCE_START)

        self._update()

        assert list(OffenderPrisoner.objects.values_list("prisoner_number", flat=True)) == ["38339A"]
        self.offender.refresh_from_db()
        assert self.offender.most_recent_prisoner_number == "38339A"

    def test_replaces_different_booking_number(self):
        make_custodial_event(self.offender, prisoner_number="11111A", sentence_start_date=SENTENCE_START)

        custody = self._update()

        assert custody.prisoner_number == "38339A"
        assert self._telemetry_names() == ["P2PImprisonmentStatusBookingNumberUpdated"]

    def test_same_booking_number_is_a_no_op(self):
        make_custodial_event(self.offender, prisoner_number="38339A", sentence_start_date=SENTENCE_START)

        with self.captureOnCommitCallbacks(execute=True):
            self._update()

        assert self._telemetry_names() == ["P2PImprisonmentStatusBookingNumberAlreadySet"]
        assert not OutboundNotification.objects.exists()
        assert not Contact.objects.exists()

    def test_padded_stored_booking_number_is_corrected(self):
        event = make_custodial_event(self.offender, prisoner_number="38339A ", sentence_start_date=SENTENCE_START)

        self._update()

        assert Custody.objects.get(event=event).prisoner_number == "38339A"
        assert self._telemetry_names() == ["P2PImprisonmentStatusBookingNumberUpdated"]

    def test_blank_stored_booking_number_counts_as_insert(self):
        event = make_custodial_event(self.offender, prisoner_number="  ", sentence_start_date=SENTENCE_START)

        self._update()

        assert Custody.objects.get(event=event).prisoner_number == "38339A"
        assert self._telemetry_names() == ["P2PImprisonmentStatusBookingNumberInserted"]

    def test_matches_sentence_start_within_tolerance(self):
        event = make_custodial_event(self.offender, sentence_start_date=SENTENCE_START)

        self._update(start=SENTENCE_START + datetime.timedelta(days=3))

        assert Custody.objects.get(event=event).prisoner_number == "38339A"

    def test_switched_off_writes_nothing(self):
        event = make_custodial_event(self.offender, sentence_start_date=SENTENCE_START)

        with self.settings(FEATURE_SWITCHES={"BOOKING_NUMBER_UPDATE": False}):
            self._update()

        assert Custody.objects.get(event=event).prisoner_number == ""
        assert not Contact.objects.exists()
        assert self._telemetry_names() == ["P2PImprisonmentStatusBookingNumberInserted"]

    def test_offender_not_found(self):
        with pytest.raises(NotFound, match="offender with nomsNumber G0000AA not found"):
            BookingNumberService.update_booking_number("G0000AA", "38339A", SENTENCE_START)
        assert self._telemetry_names() == ["P2PImprisonmentStatusOffenderNotFound"]

    def test_duplicate_offenders_are_never_tie_broken(self):
        event = make_custodial_event(self.offender, sentence_start_date=SENTENCE_START)
        make_offender("G1234AB", current_disposal=True)

        with pytest.raises(NotFound, match="found 2 offenders"):
            self._update()

        assert Custody.objects.get(event=event).prisoner_number == ""
        assert not Contact.objects.exists()
        assert self._telemetry_names() == ["P2PImprisonmentStatusMultipleOffendersFound"]

    def test_no_event_near_sentence_start(self):
        make_custodial_event(self.offender, sentence_start_date=datetime.date(2020, 1, 1))

        with pytest.raises(NotFound, match="not found"):
            self._update()
        assert self._telemetry_names() == ["P2PImprisonmentStatusCustodyEventNotFound"]

    def test_equally_close_events_are_duplicates(self):
        make_custodial_event(self.offender, sentence_start_date=SENTENCE_START)
        make_custodial_event(self.offender, sentence_start_date=SENTENCE_START)

        with pytest.raises(NotFound, match="2 duplicates found"):
            self._update()
        assert self._telemetry_names() == ["P2PImprisonmentStatusCustodyEventsHasDuplicates"]


class TestCustodyQueries(TestCase):

    def setUp(self):
        self.offender = make_offender("G1234AB", crn="A123456")

    def test_by_booking_number(self):
        event = make_custodial_event(self.offender, prisoner_number="38339A")

        custody = CustodyQueryService.get_custody_by_booking_number("G1234AB", "38339A")

        assert custody.event_id == event.pk

    def test_by_booking_number_not_found(self):
        make_custodial_event(self.offender, prisoner_number="11111A")

        with pytest.raises(NotFound, match="conviction with bookNumber 38339A not found"):
            CustodyQueryService.get_custody_by_booking_number("G1234AB", "38339A")

    def test_by_booking_number_duplicates(self):
        make_custodial_event(self.offender, prisoner_number="38339A")
        make_custodial_event(self.offender, prisoner_number="38339A")

        with pytest.raises(NotFound, match="2 duplicates found"):
            CustodyQueryService.get_custody_by_booking_number("G1234AB", "38339A")

    def test_by_booking_number_duplicate_offenders(self):
        make_offender("G1234AB")

        with pytest.raises(Conflict):
            CustodyQueryService.get_custody_by_booking_number("G1234AB", "38339A")

    def test_by_conviction_id(self):
        event = make_custodial_event(self.offender)

        custody = CustodyQueryService.get_custody_by_conviction_id("A123456", event.pk)

        assert custody.event_id == event.pk

    def test_by_conviction_id_unknown_conviction(self):
        with pytest.raises(NotFound, match="convictionId 999"):
            CustodyQueryService.get_custody_by_conviction_id("A123456", 999)

    def test_by_conviction_id_non_custodial(self):
        event = Event.objects.create(offender=self.offender, event_number="1")

        with pytest.raises(DomainError, match="not a custodial sentence"):
            CustodyQueryService.get_custody_by_conviction_id("A123456", event.pk)
