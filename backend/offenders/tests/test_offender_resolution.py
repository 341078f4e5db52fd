"""
Tests for NOMS number / CRN resolution.

Covers both resolution modes of ``OffenderQueryService``:
  * most likely — duplicates narrowed by the current-sentence tie-break;
  * single match — duplicates always reported.
"""

from __future__ import annotations

from django.test import SimpleTestCase, TestCase

from core.domain.results import Reason
from offenders.models import Offender
from offenders.services import OffenderQueryService, most_likely_offender
from tests.builders import make_offender


class TestMostLikelyOffender(SimpleTestCase):
    """The tie-break policy on its own, over unsaved records."""

    def test_single_candidate_wins(self):
        offender = Offender(crn="X000001", noms_number="G1234AB")
        assert most_likely_offender([offender]) is offender

    def test_soft_deleted_candidates_are_ignored(self):
        live = Offender(crn="X000001", noms_number="G1234AB", current_disposal=False)
        deleted = Offender(crn="X000002", noms_number="G1234AB", soft_deleted=True)
        assert most_likely_offender([deleted, live]) is live

    def test_current_sentence_breaks_the_tie(self):
        old = Offender(crn="X000001", noms_number="G1234AB", current_disposal=False)
        current = Offender(crn="X000002", noms_number="G1234AB", current_disposal=True)
        assert most_likely_offender([old, current]) is current

    def test_two_current_sentences_are_undecidable(self):
        first = Offender(crn="X000001", noms_number="G1234AB", current_disposal=True)
        second = Offender(crn="X000002", noms_number="G1234AB", current_disposal=True)
        assert most_likely_offender([first, second]) is None

    def test_no_current_sentence_is_undecidable(self):
        first = Offender(crn="X000001", noms_number="G1234AB", current_disposal=False)
        second = Offender(crn="X000002", noms_number="G1234AB", current_disposal=False)
        assert most_likely_offender([first, second]) is None

    def test_no_candidates(self):
        assert most_likely_offender([]) is None


class TestMostLikelyByNomsNumber(TestCase):

    def test_single_match(self):
        offender = make_offender("G1234AB")
        result = OffenderQueryService.get_most_likely_by_noms_number("G1234AB")
        assert result.is_success
        assert result.value == offender

    def test_no_match(self):
        result = OffenderQueryService.get_most_likely_by_noms_number("G9999ZZ")
        assert result.is_failure
        assert result.reason == Reason.OFFENDER_NOT_FOUND
        assert "G9999ZZ" in result.message

    def test_soft_deleted_record_is_invisible(self):
        make_offender("G1234AB", soft_deleted=True)
        result = OffenderQueryService.get_most_likely_by_noms_number("G1234AB")
        assert result.reason == Reason.OFFENDER_NOT_FOUND

    def test_duplicate_resolved_by_current_sentence(self):
        make_offender("G1234AB", current_disposal=False)
        current = make_offender("G1234AB", current_disposal=True)
        result = OffenderQueryService.get_most_likely_by_noms_number("G1234AB")
        assert result.is_success
        assert result.value == current

    def test_equally_valid_duplicates_fail_with_count(self):
        make_offender("G1234AB", current_disposal=True)
        make_offender("G1234AB", current_disposal=True)
        result = OffenderQueryService.get_most_likely_by_noms_number("G1234AB")
        assert result.reason == Reason.MULTIPLE_OFFENDERS_FOUND
        assert "found 2 offenders" in result.message

    def test_blank_noms_number_never_matches_probation_only_cases(self):
        make_offender("")
        make_offender("   ")
        for noms_number in ("", "   "):
            result = OffenderQueryService.get_most_likely_by_noms_number(noms_number)
            assert result.reason == Reason.OFFENDER_NOT_FOUND


class TestSingleByNomsNumber(TestCase):

    def test_single_match(self):
        offender = make_offender("G1234AB")
        assert OffenderQueryService.get_single_by_noms_number("G1234AB").value == offender

    def test_no_match(self):
        result = OffenderQueryService.get_single_by_noms_number("G1234AB")
        assert result.reason == Reason.OFFENDER_NOT_FOUND

    def test_duplicates_never_tie_broken(self):
        make_offender("G1234AB", current_disposal=False)
        make_offender("G1234AB", current_disposal=True)
        result = OffenderQueryService.get_single_by_noms_number("G1234AB")
        assert result.reason == Reason.MULTIPLE_OFFENDERS_FOUND
        assert "found 2 offenders" in result.message

    def test_blank_noms_number_is_not_found(self):
        make_offender("")
        result = OffenderQueryService.get_single_by_noms_number("")
        assert result.reason == Reason.OFFENDER_NOT_FOUND
        assert OffenderQueryService.find_all_by_noms_number("") == []


class TestByCrn(TestCase):

    def test_found(self):
        offender = make_offender("G1234AB", crn="A123456")
        assert OffenderQueryService.get_by_crn("A123456").value == offender

    def test_not_found(self):
        result = OffenderQueryService.get_by_crn("Z999999")
        assert result.reason == Reason.OFFENDER_NOT_FOUND
        assert result.message == "offender with crn Z999999 not found"
