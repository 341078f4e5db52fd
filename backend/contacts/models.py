"""
Contacts app models.

A ``Contact`` is an entry on the offender's case diary.  The custody
workflows write one whenever the prison location or the booking number
of a sentence changes, so that practitioners see the change in the
case record.
"""

from django.conf import settings
from django.db import models

from convictions.models import Event
from core.models import StandardReference, TimeStampedModel
from offenders.models import Offender


class Contact(TimeStampedModel):
    """Case diary entry."""

    offender = models.ForeignKey(
        Offender,
        on_delete=models.CASCADE,
        related_name="contacts",
        verbose_name="Offender",
    )
    event = models.ForeignKey(
        Event,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="contacts",
        verbose_name="Event",
    )
    contact_type = models.ForeignKey(
        StandardReference,
        on_delete=models.PROTECT,
        related_name="+",
        verbose_name="Contact Type",
    )
    contact_date = models.DateField(verbose_name="Contact Date")
    notes = models.TextField(blank=True, default="", verbose_name="Notes")
    staff_code = models.CharField(max_length=20, blank=True, default="", verbose_name="Staff Code")
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
        verbose_name="Created By",
    )

    class Meta:
        verbose_name = "Contact"
        verbose_name_plural = "Contacts"
        ordering = ["-contact_date", "-id"]

    def __str__(self):
        return f"{self.contact_type.code_value} on {self.contact_date} for {self.offender.crn}"
