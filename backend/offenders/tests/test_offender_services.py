"""
Tests for prison offender manager allocation and the prisoner-number
cross reference.
"""

from __future__ import annotations

import datetime

from django.test import TestCase

from offenders.models import OffenderPrisoner, PrisonOffenderManager
from offenders.services import OffenderManagerService, OffenderPrisonerService
from tests.builders import make_custodial_event, make_institution, make_offender


class TestOffenderManagerService(TestCase):

    @classmethod
    def setUpTestData(cls):
        cls.old_prison = make_institution("OLD", "HMP Old")
        cls.new_prison = make_institution("NEW", "HMP New")

    def setUp(self):
        self.offender = make_offender("G1234AB")

    def test_is_manager_at_institution(self):
        PrisonOffenderManager.objects.create(
            offender=self.offender,
            institution=self.old_prison,
            staff_code="OLDUATU",
            allocation_date=datetime.date(2024, 1, 1),
        )
        assert OffenderManagerService.is_manager_at_institution(self.offender, self.old_prison)
        assert not OffenderManagerService.is_manager_at_institution(self.offender, self.new_prison)

    def test_inactive_allocation_does_not_count(self):
        PrisonOffenderManager.objects.create(
            offender=self.offender,
            institution=self.new_prison,
            staff_code="NEWUATU",
            allocation_date=datetime.date(2024, 1, 1),
            active=False,
        )
        assert not OffenderManagerService.is_manager_at_institution(self.offender, self.new_prison)

    def test_auto_allocation_ends_previous_allocation(self):
        previous = PrisonOffenderManager.objects.create(
            offender=self.offender,
            institution=self.old_prison,
            staff_code="OLDUATU",
            allocation_date=datetime.date(2024, 1, 1),
        )

        manager = OffenderManagerService.auto_allocate_manager_at_institution(self.offender, self.new_prison)

        previous.refresh_from_db()
        assert not previous.active
        assert previous.end_date is not None
        assert manager.active
        assert manager.institution == self.new_prison
        assert manager.staff_code == "NEWUATU"
        assert PrisonOffenderManager.objects.filter(offender=self.offender, active=True).count() == 1


class TestOffenderPrisonerService(TestCase):

    def test_refresh_builds_one_row_per_booking_number(self):
        offender = make_offender("G1234AB")
        make_custodial_event(offender, prisoner_number="11111A", sentence_start_date=datetime.date(2020, 1, 1))
        make_custodial_event(offender, prisoner_number="22222B", sentence_start_date=datetime.date(2023, 6, 1))
        make_custodial_event(offender, prisoner_number="")

        prisoners = OffenderPrisonerService.refresh_offender_prisoners_for(offender)

        assert sorted(p.prisoner_number for p in prisoners) == ["11111A", "22222B"]
        offender.refresh_from_db()
        assert offender.most_recent_prisoner_number == "22222B"

    def test_refresh_replaces_stale_rows(self):
        offender = make_offender("G1234AB")
        OffenderPrisoner.objects.create(offender=offender, prisoner_number="STALE1")
        make_custodial_event(offender, prisoner_number="33333C")

        OffenderPrisonerService.refresh_offender_prisoners_for(offender)

        assert list(
            OffenderPrisoner.objects.filter(offender=offender).values_list("prisoner_number", flat=True)
        ) == ["33333C"]

    def test_duplicate_booking_numbers_collapse(self):
        offender = make_offender("G1234AB")
        make_custodial_event(offender, prisoner_number="44444D")
        make_custodial_event(offender, prisoner_number="44444D")

        prisoners = OffenderPrisonerService.refresh_offender_prisoners_for(offender)

        assert len(prisoners) == 1
