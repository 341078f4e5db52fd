"""
Core app models.

Provides the abstract timestamp base, the reference data shared by every
app (standard reference codes and prison institutions) and the outbox
table that downstream notification feeds read from.
"""

from django.contrib.contenttypes.fields import GenericForeignKey
from django.contrib.contenttypes.models import ContentType
from django.db import models


class TimeStampedModel(models.Model):
    """
    Abstract base model that provides self-updating ``created_at`` and
    ``updated_at`` timestamp fields for every concrete child model.
    """

    created_at = models.DateTimeField(
        auto_now_add=True,
        verbose_name="Created At",
    )
    updated_at = models.DateTimeField(
        auto_now=True,
        verbose_name="Updated At",
    )

    class Meta:
        abstract = True


class StandardReference(models.Model):
    """
    A coded reference value belonging to a named set.

    Sets in use (see ``core.constants``): key-date types, custody event
    types and contact types.  Rows are seeded by the
    ``seed_reference_data`` management command.
    """

    set_name = models.CharField(max_length=50, verbose_name="Reference Set", db_index=True)
    code_value = models.CharField(max_length=20, verbose_name="Code")
    code_description = models.CharField(max_length=255, verbose_name="Description")
    active = models.BooleanField(default=True, verbose_name="Active")

    class Meta:
        verbose_name = "Standard Reference"
        verbose_name_plural = "Standard References"
        ordering = ["set_name", "code_value"]
        unique_together = [("set_name", "code_value")]

    def __str__(self):
        return f"{self.set_name}:{self.code_value} ({self.code_description})"


class Institution(models.Model):
    """
    A prison (or other custodial establishment) known to the case system.

    ``code`` is the NOMIS agency code the prisons system sends in transfer
    notices, e.g. ``"MDI"``.
    """

    code = models.CharField(max_length=10, unique=True, verbose_name="NOMIS Code")
    description = models.CharField(max_length=255, verbose_name="Description")
    establishment = models.BooleanField(default=True, verbose_name="Establishment")

    class Meta:
        verbose_name = "Institution"
        verbose_name_plural = "Institutions"
        ordering = ["code"]

    def __str__(self):
        return f"{self.code} — {self.description}"


class NotificationFeed(models.TextChoices):
    SPG = "spg", "SPG"
    IAPS = "iaps", "IAPS"


class OutboundNotification(TimeStampedModel):
    """
    Outbox row for a downstream notification.

    Feed adapters poll this table and deliver the messages; delivery and
    message encoding are not handled here.  The related object (normally a
    conviction ``Event``) is stored through a ``GenericForeignKey``.
    """

    feed = models.CharField(max_length=10, choices=NotificationFeed.choices, verbose_name="Feed")
    message_type = models.CharField(max_length=50, verbose_name="Message Type", db_index=True)
    payload = models.JSONField(default=dict, blank=True, verbose_name="Payload")
    delivered = models.BooleanField(default=False, verbose_name="Delivered")

    content_type = models.ForeignKey(
        ContentType,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        verbose_name="Related Content Type",
    )
    object_id = models.PositiveIntegerField(
        null=True,
        blank=True,
        verbose_name="Related Object ID",
    )
    content_object = GenericForeignKey("content_type", "object_id")

    class Meta:
        verbose_name = "Outbound Notification"
        verbose_name_plural = "Outbound Notifications"
        ordering = ["created_at", "id"]
        indexes = [
            models.Index(fields=["feed", "delivered"], name="core_outbox_feed_delivered_idx"),
        ]

    def __str__(self):
        return f"[{self.get_feed_display()}] {self.message_type}"
