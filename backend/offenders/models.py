"""
Offenders app models.

An ``Offender`` is the internal case record for a person under probation
or custody supervision.  It is identified internally by its primary key
and the unique ``crn``; the prisons system identifies it by
``noms_number``, which is *not* guaranteed unique in this store (the
external feed occasionally creates duplicates).
"""

from django.db import models

from core.models import Institution, TimeStampedModel


class Offender(TimeStampedModel):
    """
    Case record.

    * ``soft_deleted`` records are invisible to every lookup.
    * ``current_disposal`` is set while the case has a currently active
      sentence; it is the tie-break used to pick the most likely record
      among NOMS-number duplicates.
    """

    crn = models.CharField(
        max_length=7,
        unique=True,
        verbose_name="CRN",
        help_text="Case reference number.",
    )
    noms_number = models.CharField(
        max_length=7,
        blank=True,
        default="",
        db_index=True,
        verbose_name="NOMS Number",
    )
    first_name = models.CharField(max_length=35, blank=True, default="", verbose_name="First Name")
    surname = models.CharField(max_length=35, blank=True, default="", verbose_name="Surname")
    current_disposal = models.BooleanField(
        default=False,
        verbose_name="Currently Sentenced",
    )
    most_recent_prisoner_number = models.CharField(
        max_length=35,
        blank=True,
        default="",
        verbose_name="Most Recent Prisoner Number",
    )
    soft_deleted = models.BooleanField(default=False, verbose_name="Soft Deleted")

    class Meta:
        verbose_name = "Offender"
        verbose_name_plural = "Offenders"
        ordering = ["crn"]

    def __str__(self):
        return f"{self.crn} ({self.noms_number or 'no NOMS number'})"


class PrisonOffenderManager(TimeStampedModel):
    """
    Allocation of a prison offender manager (POM) to an offender at an
    institution.  At most one allocation per offender is ``active``.
    """

    offender = models.ForeignKey(
        Offender,
        on_delete=models.CASCADE,
        related_name="prison_offender_managers",
        verbose_name="Offender",
    )
    institution = models.ForeignKey(
        Institution,
        on_delete=models.PROTECT,
        related_name="prison_offender_managers",
        verbose_name="Institution",
    )
    staff_code = models.CharField(max_length=20, verbose_name="Staff Code")
    allocation_date = models.DateField(verbose_name="Allocation Date")
    allocation_reason = models.CharField(max_length=255, blank=True, default="", verbose_name="Allocation Reason")
    end_date = models.DateField(null=True, blank=True, verbose_name="End Date")
    active = models.BooleanField(default=True, verbose_name="Active")

    class Meta:
        verbose_name = "Prison Offender Manager"
        verbose_name_plural = "Prison Offender Managers"
        ordering = ["-allocation_date", "-id"]

    def __str__(self):
        return f"POM {self.staff_code} at {self.institution.code} for {self.offender.crn}"


class OffenderPrisoner(models.Model):
    """
    Cross reference between an offender and each booking (prisoner) number
    found on their custodial sentences.  Rebuilt by
    ``OffenderPrisonerService.refresh_offender_prisoners_for``.
    """

    offender = models.ForeignKey(
        Offender,
        on_delete=models.CASCADE,
        related_name="prisoners",
        verbose_name="Offender",
    )
    prisoner_number = models.CharField(max_length=35, verbose_name="Prisoner Number")
    event_id = models.PositiveIntegerField(null=True, blank=True, verbose_name="Event ID")

    class Meta:
        verbose_name = "Offender Prisoner"
        verbose_name_plural = "Offender Prisoners"
        unique_together = [("offender", "prisoner_number")]

    def __str__(self):
        return f"{self.offender.crn} ↔ {self.prisoner_number}"
