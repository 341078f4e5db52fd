"""
Accounts app models.

Defines the custom ``User`` model.  Users are the *acting* identity stamped
on key-date audit columns and case contacts; authentication itself is
provided by Django and DRF (session or JWT).
"""

from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    """
    Staff member or service account acting on case records.

    ``staff_code`` is the case system's officer code, recorded on contacts
    the user creates.  Service accounts used by the prison-event listener
    normally leave it blank.
    """

    staff_code = models.CharField(
        max_length=20,
        blank=True,
        default="",
        verbose_name="Staff Code",
        db_index=True,
    )

    class Meta:
        verbose_name = "User"
        verbose_name_plural = "Users"

    def __str__(self):
        return self.username
