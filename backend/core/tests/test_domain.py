"""
Unit tests for the shared ``core.domain`` building blocks: tagged
results, the exception handler, feature switches, telemetry and the
notification outbox.
"""

from __future__ import annotations

from unittest import mock

import pytest
from django.test import TestCase
from rest_framework.exceptions import ValidationError

from core.domain.exception_handler import domain_exception_handler
from core.domain.exceptions import Conflict, DomainError, NotFound
from core.domain.features import FeatureSwitches
from core.domain.notifications import IapsNotificationService, SpgNotificationService
from core.domain.results import CustodyUpdate, Failure, Outcome, Reason, Success
from core.domain.telemetry import TelemetryClient
from core.models import OutboundNotification
from tests.builders import make_custodial_event, make_offender


# ════════════════════════════════════════════════════════════════════
#  Tagged results
# ════════════════════════════════════════════════════════════════════

class TestResults:

    def test_success_chains(self):
        result = Success(2).map(lambda v: v + 1).flat_map(lambda v: Success(v * 10))
        assert result == Success(30)
        assert result.is_success and not result.is_failure

    def test_failure_short_circuits(self):
        called = mock.Mock()
        failure = Failure(Reason.OFFENDER_NOT_FOUND, "missing")
        assert failure.map(called).flat_map(called) is failure
        called.assert_not_called()

    def test_fold_picks_branch(self):
        assert Success(1).fold(lambda f: "failure", lambda v: f"value {v}") == "value 1"
        assert Failure(Reason.INVALID_TYPE_CODE, "bad").fold(lambda f: f.reason, lambda v: v) == Reason.INVALID_TYPE_CODE

    @pytest.mark.parametrize("reason,expected", [
        (Reason.OFFENDER_NOT_FOUND, NotFound),
        (Reason.CONVICTION_NOT_FOUND, NotFound),
        (Reason.TRANSFER_PRISON_NOT_FOUND, NotFound),
        (Reason.NO_ACTIVE_CUSTODIAL_SENTENCE, NotFound),
        (Reason.MULTIPLE_OFFENDERS_FOUND, Conflict),
        (Reason.MULTIPLE_CUSTODIAL_SENTENCES, Conflict),
        (Reason.CUSTODIAL_SENTENCE_NOT_FOUND_IN_CORRECT_STATE, Conflict),
        (Reason.INVALID_TYPE_CODE, DomainError),
    ])
    def test_every_reason_maps_to_an_exception(self, reason, expected):
        with pytest.raises(expected) as excinfo:
            Failure(reason, "message").unwrap()
        assert type(excinfo.value) is expected
        assert str(excinfo.value) == "message"

    def test_reason_values_are_stable(self):
        assert Reason.MULTIPLE_OFFENDERS_FOUND.value == "MultipleOffendersFound"
        assert Outcome.NO_UPDATE_REQUIRED.value == "NoUpdateRequired"

    def test_custody_update_constructors(self):
        assert CustodyUpdate.updated([1]).outcome == Outcome.UPDATED
        assert CustodyUpdate.no_update_required([]).outcome == Outcome.NO_UPDATE_REQUIRED


# ════════════════════════════════════════════════════════════════════
#  Exception handler
# ════════════════════════════════════════════════════════════════════

class TestExceptionHandler:

    @pytest.mark.parametrize("exc,status_code", [
        (NotFound("gone"), 404),
        (Conflict("clash"), 409),
        (DomainError("bad"), 400),
    ])
    def test_domain_exceptions(self, exc, status_code):
        response = domain_exception_handler(exc, {"view": None})
        assert response.status_code == status_code
        assert response.data == {"detail": str(exc)}

    def test_drf_exceptions_use_default_handler(self):
        response = domain_exception_handler(ValidationError({"date": ["required"]}), {})
        assert response.status_code == 400
        assert "date" in response.data

    def test_unknown_exceptions_fall_through(self):
        assert domain_exception_handler(RuntimeError("boom"), {}) is None


# ════════════════════════════════════════════════════════════════════
#  Feature switches
# ════════════════════════════════════════════════════════════════════

class TestFeatureSwitches:

    def test_reads_settings_on_every_access(self, settings):
        settings.FEATURE_SWITCHES = {"CUSTODY_UPDATE": True}
        assert FeatureSwitches.custody_update_enabled()
        settings.FEATURE_SWITCHES = {"CUSTODY_UPDATE": False}
        assert not FeatureSwitches.custody_update_enabled()

    def test_missing_switch_is_off(self, settings):
        settings.FEATURE_SWITCHES = {}
        assert not FeatureSwitches.booking_number_update_enabled()
        assert not FeatureSwitches.multi_event_key_date_update_enabled()
        assert not FeatureSwitches.multi_event_location_update_enabled()


# ════════════════════════════════════════════════════════════════════
#  Telemetry
# ════════════════════════════════════════════════════════════════════

class TestTelemetry:

    def test_event_is_logged_with_string_properties(self):
        with mock.patch("core.domain.telemetry.telemetry_logger") as sink:
            TelemetryClient.track_event("POMLocationUpdated", {"updatedCount": 2, "toAgency": None})

        extra = sink.info.call_args.kwargs["extra"]
        assert extra["telemetry_event"] == "POMLocationUpdated"
        assert extra["telemetry_properties"] == {"updatedCount": "2", "toAgency": ""}

    def test_broken_sink_never_raises(self):
        with mock.patch("core.domain.telemetry.telemetry_logger") as sink:
            sink.info.side_effect = RuntimeError("collector down")
            TelemetryClient.track_event("KeyDateAdded", {})


# ════════════════════════════════════════════════════════════════════
#  Notification outbox
# ════════════════════════════════════════════════════════════════════

class TestNotificationOutbox(TestCase):

    def setUp(self):
        self.offender = make_offender("G1234AB")
        self.event = make_custodial_event(self.offender)

    def test_nothing_written_before_commit(self):
        with self.captureOnCommitCallbacks(execute=False) as callbacks:
            SpgNotificationService.notify_custody_update(self.event)

        assert len(callbacks) == 1
        assert not OutboundNotification.objects.exists()

    def test_written_after_commit(self):
        with self.captureOnCommitCallbacks(execute=True):
            SpgNotificationService.notify_custody_update(self.event)
            IapsNotificationService.notify_event_updated(self.event)

        rows = list(OutboundNotification.objects.values_list("feed", "message_type"))
        assert rows == [("spg", "CUSTODY_UPDATED"), ("iaps", "EVENT_UPDATED")]

    def test_failed_write_is_logged_not_raised(self):
        with mock.patch.object(OutboundNotification.objects, "create", side_effect=RuntimeError("db down")):
            with self.assertLogs("core.domain.notifications", level="ERROR"):
                with self.captureOnCommitCallbacks(execute=True):
                    SpgNotificationService.notify_custody_update(self.event)

    def test_location_change_payload_names_institution(self):
        with self.captureOnCommitCallbacks(execute=True):
            SpgNotificationService.notify_custody_location_change(self.event)

        payload = OutboundNotification.objects.get().payload
        assert payload["institutionCode"] is None
        assert payload["nomsNumber"] == "G1234AB"
