"""
Convictions app models.

Covers the custodial side of a sentence: the sentence ``Event`` itself,
its ``Custody`` sub-record (institution, custodial status, booking
number), the typed ``KeyDate`` milestones attached to a custody, and the
append-only ``CustodyHistory`` audit trail.
"""

from django.conf import settings
from django.db import models

from core.models import Institution, StandardReference, TimeStampedModel
from offenders.models import Offender


# ────────────────────────────────────────────────────────────────────
# Choice enumerations
# ────────────────────────────────────────────────────────────────────

class CustodialStatus(models.TextChoices):
    """
    Closed set of custodial states.  The stored value is the case system's
    status code so imported data keeps its meaning.

    No transitions are modelled generically; only the prison-location
    update moves ``SENTENCED_AWAITING_CUSTODY`` to ``IN_CUSTODY``.
    """

    SENTENCED_AWAITING_CUSTODY = "A", "Sentenced - In Custody"
    IN_CUSTODY = "D", "In Custody"
    RELEASED_ON_LICENCE = "B", "Released - On Licence"
    RECALLED = "C", "In Custody - Recalled"
    TERMINATED = "T", "Terminated"
    POST_SENTENCE_SUPERVISION = "P", "Post Sentence Supervision"
    MIGRATED_DATA = "-1", "Migrated Data"
    IN_CUSTODY_RELEASE_ON_TEMPORARY_LICENCE = "R", "In Custody - RoTL"
    IN_CUSTODY_IMMIGRATION_REMOVAL_CENTRE = "I", "In Custody - IRC"
    AUTO_TERMINATED = "AT", "Auto Terminated"


# ────────────────────────────────────────────────────────────────────
# Querysets
# ────────────────────────────────────────────────────────────────────

class EventQuerySet(models.QuerySet):

    def active(self):
        """Events that are flagged active, not soft deleted and not terminated."""
        return self.filter(
            active_flag=True,
            soft_deleted=False,
            sentence_termination_date__isnull=True,
        )

    def with_custody(self):
        return self.filter(
            custody__isnull=False,
            custody__soft_deleted=False,
        ).select_related("custody", "custody__institution", "offender")


# ────────────────────────────────────────────────────────────────────
# Models
# ────────────────────────────────────────────────────────────────────

class Event(TimeStampedModel):
    """
    One sentence / conviction instance belonging to an offender.

    The booking number of a custodial sentence lives on its ``Custody``
    (``prisoner_number``); ``booking_number`` exposes it here.
    """

    offender = models.ForeignKey(
        Offender,
        on_delete=models.CASCADE,
        related_name="events",
        verbose_name="Offender",
    )
    event_number = models.CharField(max_length=10, verbose_name="Event Number")
    active_flag = models.BooleanField(default=True, verbose_name="Active")
    soft_deleted = models.BooleanField(default=False, verbose_name="Soft Deleted")
    conviction_date = models.DateField(null=True, blank=True, verbose_name="Conviction Date")
    sentence_start_date = models.DateField(null=True, blank=True, verbose_name="Sentence Start Date")
    sentence_termination_date = models.DateField(
        null=True,
        blank=True,
        verbose_name="Sentence Termination Date",
    )

    objects = EventQuerySet.as_manager()

    class Meta:
        verbose_name = "Event"
        verbose_name_plural = "Events"
        ordering = ["offender_id", "event_number"]

    def __str__(self):
        return f"Event {self.event_number} of {self.offender.crn}"

    @property
    def is_active(self) -> bool:
        return self.active_flag and not self.soft_deleted and self.sentence_termination_date is None

    @property
    def booking_number(self) -> str:
        custody = getattr(self, "custody", None)
        return custody.prisoner_number if custody is not None else ""


class Custody(TimeStampedModel):
    """
    Mutable custodial sub-record of a sentence event.

    The three predicates below are the only eligibility rules the
    reconciliation engine uses.  A custody with no status answers
    ``False`` to all of them.
    """

    event = models.OneToOneField(
        Event,
        on_delete=models.CASCADE,
        related_name="custody",
        verbose_name="Event",
    )
    custodial_status = models.CharField(
        max_length=2,
        choices=CustodialStatus.choices,
        null=True,
        blank=True,
        verbose_name="Custodial Status",
    )
    institution = models.ForeignKey(
        Institution,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="custodies",
        verbose_name="Institution",
    )
    prisoner_number = models.CharField(
        max_length=35,
        blank=True,
        default="",
        verbose_name="Prisoner (Booking) Number",
        db_index=True,
    )
    status_change_date = models.DateField(null=True, blank=True, verbose_name="Status Change Date")
    location_change_date = models.DateField(null=True, blank=True, verbose_name="Location Change Date")
    soft_deleted = models.BooleanField(default=False, verbose_name="Soft Deleted")

    class Meta:
        verbose_name = "Custody"
        verbose_name_plural = "Custodies"

    def __str__(self):
        return f"Custody for event {self.event_id} ({self.custodial_status or 'no status'})"

    def is_in_custody(self) -> bool:
        return self.custodial_status == CustodialStatus.IN_CUSTODY

    def is_about_to_enter_custody(self) -> bool:
        return self.custodial_status == CustodialStatus.SENTENCED_AWAITING_CUSTODY

    def is_post_sentence_supervision(self) -> bool:
        return self.custodial_status == CustodialStatus.POST_SENTENCE_SUPERVISION

    def find_key_date(self, type_code: str) -> "KeyDate | None":
        for key_date in self.key_dates.all():
            if key_date.key_date_type.code_value == type_code:
                return key_date
        return None


class KeyDate(models.Model):
    """
    A typed date milestone on a custody, e.g. sentence expiry.

    The type is unique per custody; re-adding a type replaces the date.
    Audit columns are stamped explicitly by ``CustodyKeyDateService`` so
    that a replace keeps the original creation stamp.
    """

    custody = models.ForeignKey(
        Custody,
        on_delete=models.CASCADE,
        related_name="key_dates",
        verbose_name="Custody",
    )
    key_date_type = models.ForeignKey(
        StandardReference,
        on_delete=models.PROTECT,
        related_name="+",
        verbose_name="Key Date Type",
    )
    key_date = models.DateField(verbose_name="Key Date")
    created_datetime = models.DateTimeField(verbose_name="Created At")
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
        verbose_name="Created By",
    )
    last_updated_datetime = models.DateTimeField(verbose_name="Last Updated At")
    last_updated_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
        verbose_name="Last Updated By",
    )

    class Meta:
        verbose_name = "Key Date"
        verbose_name_plural = "Key Dates"
        ordering = ["custody_id", "id"]
        unique_together = [("custody", "key_date_type")]

    def __str__(self):
        return f"{self.key_date_type.code_value}={self.key_date.isoformat()}"


class CustodyHistory(models.Model):
    """
    Immutable audit trail of institution and status changes on a custody.

    Rows are only ever inserted: saving an existing row or deleting one
    raises ``CustodyHistory.Immutable``.
    """

    class Immutable(Exception):
        pass

    custody = models.ForeignKey(
        Custody,
        on_delete=models.PROTECT,
        related_name="history",
        verbose_name="Custody",
    )
    offender = models.ForeignKey(
        Offender,
        on_delete=models.PROTECT,
        related_name="custody_history",
        verbose_name="Offender",
    )
    custody_event_type = models.ForeignKey(
        StandardReference,
        on_delete=models.PROTECT,
        related_name="+",
        verbose_name="Custody Event Type",
    )
    detail = models.TextField(blank=True, default="", verbose_name="Detail")
    when = models.DateField(verbose_name="Date")
    created_at = models.DateTimeField(auto_now_add=True, verbose_name="Created At")

    class Meta:
        verbose_name = "Custody History"
        verbose_name_plural = "Custody History"
        ordering = ["created_at", "id"]

    def __str__(self):
        return f"{self.custody_event_type.code_value} on {self.when} for custody {self.custody_id}"

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise CustodyHistory.Immutable("Custody history entries cannot be modified.")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise CustodyHistory.Immutable("Custody history entries cannot be deleted.")
