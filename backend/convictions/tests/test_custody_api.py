"""
Integration tests — custody endpoints under ``/api/offenders/``.

Endpoints under test:
    GET  nomsNumber/{noms}/custody/bookingNumber/{booking}
    PUT  nomsNumber/{noms}/custody/bookingNumber/{booking}
    PUT  nomsNumber/{noms}/custody/bookingNumber
    PUT  nomsNumber/{noms}/custody/keyDates/{typeCode}
    GET  crn/{crn}/convictions/{id}/custody
    PUT  crn/{crn}/convictions/{id}/custody/keyDates/{typeCode}

Access:   Authenticated only (IsAuthenticated, JWT bearer).
Errors:   rendered by the global domain exception handler as
          ``{"detail": message}``.
"""

from __future__ import annotations

import datetime

import pytest
from django.urls import reverse
from rest_framework import status

from convictions.models import CustodialStatus, Custody, KeyDate
from tests.builders import make_custodial_event, make_institution, make_offender

pytestmark = pytest.mark.django_db


@pytest.fixture()
def prison_client(api_client, auth_header):
    header = auth_header(username="prison_api")
    api_client.credentials(HTTP_AUTHORIZATION=header["Authorization"])
    return api_client


@pytest.fixture()
def offender():
    return make_offender("G1234AB", crn="A123456")


@pytest.fixture()
def switches(settings):
    settings.FEATURE_SWITCHES = {
        "CUSTODY_UPDATE": True,
        "BOOKING_NUMBER_UPDATE": True,
        "MULTI_EVENT_KEY_DATE_UPDATE": False,
        "MULTI_EVENT_LOCATION_UPDATE": False,
    }
    return settings.FEATURE_SWITCHES


class TestAuthentication:

    def test_anonymous_request_is_rejected(self, api_client, offender):
        url = reverse("custody-by-booking-number", args=["G1234AB", "38339A"])
        response = api_client.get(url)
        assert response.status_code == status.HTTP_401_UNAUTHORIZED


class TestCustodyReads:

    def test_get_by_booking_number(self, prison_client, offender):
        prison = make_institution("MDI", "HMP Moorland")
        make_custodial_event(offender, institution=prison, prisoner_number="38339A")

        response = prison_client.get(reverse("custody-by-booking-number", args=["G1234AB", "38339A"]))

        assert response.status_code == status.HTTP_200_OK
        assert response.data["bookingNumber"] == "38339A"
        assert response.data["institution"] == {"code": "MDI", "description": "HMP Moorland"}
        assert response.data["status"] == {"code": "D", "description": "In Custody"}

    def test_get_by_booking_number_unknown_offender(self, prison_client):
        response = prison_client.get(reverse("custody-by-booking-number", args=["G0000AA", "38339A"]))

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data == {"detail": "offender with nomsNumber G0000AA not found"}

    def test_get_by_conviction(self, prison_client, offender):
        event = make_custodial_event(offender)

        response = prison_client.get(reverse("custody-by-conviction", args=["A123456", event.pk]))

        assert response.status_code == status.HTTP_200_OK
        assert response.data["convictionId"] == event.pk

    def test_get_by_non_custodial_conviction(self, prison_client, offender):
        from convictions.models import Event

        event = Event.objects.create(offender=offender, event_number="1")

        response = prison_client.get(reverse("custody-by-conviction", args=["A123456", event.pk]))

        assert response.status_code == status.HTTP_400_BAD_REQUEST


class TestPrisonLocationEndpoint:

    def test_transfer(self, prison_client, offender, reference_data, switches):
        new = make_institution("NEW", "HMP New")
        event = make_custodial_event(offender, status=CustodialStatus.SENTENCED_AWAITING_CUSTODY)

        response = prison_client.put(
            reverse("custody-by-booking-number", args=["G1234AB", "38339A"]),
            {"nomsPrisonInstitutionCode": "NEW"},
            format="json",
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data["institution"]["code"] == "NEW"
        assert response.data["status"]["code"] == "D"
        assert Custody.objects.get(event=event).institution == new

    def test_unknown_prison_is_not_found(self, prison_client, offender, reference_data, switches):
        make_custodial_event(offender)

        response = prison_client.put(
            reverse("custody-by-booking-number", args=["G1234AB", "38339A"]),
            {"nomsPrisonInstitutionCode": "XXX"},
            format="json",
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert "XXX" in response.data["detail"]

    def test_missing_body_is_rejected(self, prison_client, offender):
        response = prison_client.put(
            reverse("custody-by-booking-number", args=["G1234AB", "38339A"]), {}, format="json",
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST


class TestBookingNumberEndpoint:

    def test_update(self, prison_client, offender, reference_data, switches):
        make_custodial_event(offender, sentence_start_date=datetime.date(2024, 1, 15))

        response = prison_client.put(
            reverse("custody-booking-number", args=["G1234AB"]),
            {"bookingNumber": "38339A", "sentenceStartDate": "2024-01-16"},
            format="json",
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data["bookingNumber"] == "38339A"

    def test_blank_booking_number_is_rejected(self, prison_client, offender):
        response = prison_client.put(
            reverse("custody-booking-number", args=["G1234AB"]),
            {"bookingNumber": "  ", "sentenceStartDate": "2024-01-16"},
            format="json",
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST


class TestKeyDateEndpoints:

    def test_put_by_noms_number(self, prison_client, offender, reference_data, switches):
        event = make_custodial_event(offender)

        response = prison_client.put(
            reverse("key-date-by-noms-number", args=["G1234AB", "POM1"]),
            {"date": "2025-03-01"},
            format="json",
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data == {
            "type": {"code": "POM1", "description": "POM Handover expected start date"},
            "date": "2025-03-01",
        }
        key_date = KeyDate.objects.get(custody=event.custody)
        assert key_date.created_by.username == "prison_api"

    def test_invalid_type_code(self, prison_client, offender, reference_data, switches):
        make_custodial_event(offender)

        response = prison_client.put(
            reverse("key-date-by-noms-number", args=["G1234AB", "NOPE"]),
            {"date": "2025-03-01"},
            format="json",
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data == {"detail": "NOPE is not a valid custody key date"}

    def test_multiple_events_switched_off(self, prison_client, offender, reference_data, switches):
        make_custodial_event(offender)
        make_custodial_event(offender)

        response = prison_client.put(
            reverse("key-date-by-noms-number", args=["G1234AB", "POM1"]),
            {"date": "2025-03-01"},
            format="json",
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_put_by_conviction(self, prison_client, offender, reference_data, switches):
        event = make_custodial_event(offender)

        response = prison_client.put(
            reverse("key-date-by-conviction", args=["A123456", event.pk, "LED"]),
            {"date": "2026-01-01"},
            format="json",
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data["type"]["code"] == "LED"

    def test_put_by_conviction_unknown_crn(self, prison_client):
        response = prison_client.put(
            reverse("key-date-by-conviction", args=["Z999999", 1, "LED"]),
            {"date": "2026-01-01"},
            format="json",
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND
