"""
Offenders app Service Layer.

This module is the **single source of truth** for resolving external
identifiers to case records and for the offender-level side effects of
custody changes.

Architecture
------------
- ``most_likely_offender``       — NOMS-number duplicate tie-break policy.
- ``OffenderQueryService``       — CRN / NOMS-number resolution (pure).
- ``OffenderManagerService``     — Prison offender manager allocation.
- ``OffenderPrisonerService``    — Offender ↔ booking-number cross reference.

Resolution modes
----------------
The prisons feed occasionally creates several case records for one NOMS
number, so two modes exist:

* **most likely** — used by transfer updates.  Duplicates are narrowed by
  ``most_likely_offender``; only an undecidable tie is an error.
* **single match** — used by booking-number reads and writes.  Anything
  other than exactly one record is reported, no tie-break applied.

Both return ``core.domain.results`` values and never raise for expected
conditions.
"""

from __future__ import annotations

import logging
from typing import Iterable

from django.utils import timezone

from core.constants import AUTO_ALLOCATION_REASON, UNALLOCATED_STAFF_SUFFIX
from core.domain.results import Failure, Reason, Result, Success
from core.models import Institution

from .models import Offender, OffenderPrisoner, PrisonOffenderManager

logger = logging.getLogger(__name__)


def most_likely_offender(candidates: Iterable[Offender]) -> Offender | None:
    """
    Pick the most likely case record among NOMS-number candidates.

    Tie-break order:

    1. soft-deleted records are never candidates;
    2. a single remaining record wins;
    3. otherwise only records with a currently active sentence
       (``current_disposal``) are kept, and a single survivor wins.

    Returns ``None`` when the tie cannot be broken (including the case of
    no candidates at all — callers distinguish that by counting first).
    """
    live = [offender for offender in candidates if not offender.soft_deleted]
    if len(live) == 1:
        return live[0]
    current = [offender for offender in live if offender.current_disposal]
    if len(current) == 1:
        return current[0]
    return None


def _offender_not_found(noms_number: str) -> Failure:
    return Failure(
        Reason.OFFENDER_NOT_FOUND,
        f"offender with nomsNumber {noms_number} not found",
    )


def _multiple_offenders(noms_number: str, count: int) -> Failure:
    return Failure(
        Reason.MULTIPLE_OFFENDERS_FOUND,
        f"Expected offender with NOMS number {noms_number} to be unique, found {count} offenders",
    )


# ═══════════════════════════════════════════════════════════════════
#  Offender Query Service
# ═══════════════════════════════════════════════════════════════════


class OffenderQueryService:
    """Resolves external identifiers to exactly one ``Offender``."""

    @staticmethod
    def find_all_by_noms_number(noms_number: str) -> list[Offender]:
        # Probation-only cases carry a blank NOMS number.
        if not noms_number or not noms_number.strip():
            return []
        return list(
            Offender.objects.filter(noms_number=noms_number, soft_deleted=False).order_by("pk")
        )

    @staticmethod
    def get_by_crn(crn: str) -> Result[Offender]:
        offender = Offender.objects.filter(crn=crn, soft_deleted=False).first()
        if offender is None:
            return Failure(Reason.OFFENDER_NOT_FOUND, f"offender with crn {crn} not found")
        return Success(offender)

    @staticmethod
    def get_by_id(offender_id: int) -> Result[Offender]:
        offender = Offender.objects.filter(pk=offender_id, soft_deleted=False).first()
        if offender is None:
            return Failure(Reason.OFFENDER_NOT_FOUND, f"offender with id {offender_id} not found")
        return Success(offender)

    @classmethod
    def get_most_likely_by_noms_number(cls, noms_number: str) -> Result[Offender]:
        """
        Most-likely mode.

        Returns
        -------
        Success(Offender)
            Exactly one candidate, or the tie-break picked one.
        Failure(OffenderNotFound)
            No candidate.
        Failure(MultipleOffendersFound)
            The tie-break could not decide; the message names the count.
        """
        candidates = cls.find_all_by_noms_number(noms_number)
        if not candidates:
            return _offender_not_found(noms_number)
        offender = most_likely_offender(candidates)
        if offender is None:
            logger.warning(
                "Unable to pick most likely offender for NOMS number %s among %d records",
                noms_number,
                len(candidates),
            )
            return _multiple_offenders(noms_number, len(candidates))
        return Success(offender)

    @classmethod
    def get_single_by_noms_number(cls, noms_number: str) -> Result[Offender]:
        """Single-match mode: any count other than one is a failure."""
        candidates = cls.find_all_by_noms_number(noms_number)
        if not candidates:
            return _offender_not_found(noms_number)
        if len(candidates) > 1:
            return _multiple_offenders(noms_number, len(candidates))
        return Success(candidates[0])


# ═══════════════════════════════════════════════════════════════════
#  Offender Manager Service
# ═══════════════════════════════════════════════════════════════════


class OffenderManagerService:
    """Prison offender manager (POM) allocation."""

    @staticmethod
    def is_manager_at_institution(offender: Offender, institution: Institution) -> bool:
        return PrisonOffenderManager.objects.filter(
            offender=offender, institution=institution, active=True,
        ).exists()

    @staticmethod
    def auto_allocate_manager_at_institution(offender: Offender, institution: Institution) -> PrisonOffenderManager:
        """
        End any active allocation and allocate the institution's
        unallocated staff member.
        """
        today = timezone.localdate()
        ended = PrisonOffenderManager.objects.filter(offender=offender, active=True).update(
            active=False, end_date=today, updated_at=timezone.now(),
        )
        manager = PrisonOffenderManager.objects.create(
            offender=offender,
            institution=institution,
            staff_code=f"{institution.code}{UNALLOCATED_STAFF_SUFFIX}",
            allocation_date=today,
            allocation_reason=AUTO_ALLOCATION_REASON,
            active=True,
        )
        logger.info(
            "Auto allocated POM %s at %s for offender %s (%d previous allocation(s) ended)",
            manager.staff_code,
            institution.code,
            offender.crn,
            ended,
        )
        return manager


# ═══════════════════════════════════════════════════════════════════
#  Offender Prisoner Service
# ═══════════════════════════════════════════════════════════════════


class OffenderPrisonerService:
    """Maintains the offender ↔ prisoner-number cross reference."""

    @staticmethod
    def refresh_offender_prisoners_for(offender: Offender) -> list[OffenderPrisoner]:
        """
        Rebuild the cross reference from every custodial event's booking
        number and record the booking number of the most recently started
        sentence on the offender.
        """
        from convictions.models import Event  # avoids a circular import

        events = (
            Event.objects.filter(offender=offender, soft_deleted=False)
            .with_custody()
            .exclude(custody__prisoner_number="")
            .order_by("-sentence_start_date", "-pk")
        )

        OffenderPrisoner.objects.filter(offender=offender).delete()
        prisoners: list[OffenderPrisoner] = []
        seen: set[str] = set()
        for event in events:
            number = event.custody.prisoner_number
            if number in seen:
                continue
            seen.add(number)
            prisoners.append(
                OffenderPrisoner.objects.create(
                    offender=offender, prisoner_number=number, event_id=event.pk,
                )
            )

        offender.most_recent_prisoner_number = prisoners[0].prisoner_number if prisoners else ""
        offender.save(update_fields=["most_recent_prisoner_number", "updated_at"])
        return prisoners
