"""
Management command: seed_reference_data
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

Seeds the ``StandardReference`` table with every reference code the
custody workflows rely on:

    • key date types        (``THROUGHCARE DATE TYPE``)
    • custody event types   (``CUSTODY EVENT TYPE``)
    • contact types         (``CONTACT TYPE``)

The values come from ``core.constants.REFERENCE_DATA``.

The command is **idempotent** — safe to run multiple times.  Existing
rows keep their primary key; descriptions are refreshed and the row is
re-activated.

Usage::

    python manage.py seed_reference_data
"""

from django.core.management.base import BaseCommand
from django.db import transaction

from core.constants import REFERENCE_DATA
from core.models import StandardReference


class Command(BaseCommand):
    help = (
        "Seeds key date types, custody event types and contact types.  "
        "Safe to run multiple times (idempotent)."
    )

    @transaction.atomic
    def handle(self, *args, **options):
        self.stdout.write(self.style.MIGRATE_HEADING(
            "\n══════════════════════════════════════════"
            "\n  Reference Data — Seeding Standard Codes"
            "\n══════════════════════════════════════════\n"
        ))

        created_count = 0
        updated_count = 0

        for set_name, code, description in REFERENCE_DATA:
            reference, created = StandardReference.objects.get_or_create(
                set_name=set_name,
                code_value=code,
                defaults={"code_description": description, "active": True},
            )
            if created:
                created_count += 1
                action = "Created"
            else:
                if reference.code_description != description or not reference.active:
                    reference.code_description = description
                    reference.active = True
                    reference.save(update_fields=["code_description", "active"])
                updated_count += 1
                action = "Checked"

            self.stdout.write(self.style.SUCCESS(
                f"  ✔  {action} {set_name:<22s} {code:<6s} {description}"
            ))

        self.stdout.write(self.style.MIGRATE_HEADING(
            "\n──────────────────────────────────────────"
        ))
        self.stdout.write(self.style.SUCCESS(
            f"  Done!  {created_count} code(s) created, "
            f"{updated_count} already present.\n"
        ))
