"""
Management command: sync_prison_location
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

Fire-and-forget prison location update for one offender, as triggered by
a prison movement event.  Runs ``CustodyUpdateService.sync_prison_location``
and reports the outcome; domain failures are reported, not raised, so the
exit status is zero unless something unexpected happens.

Usage::

    python manage.py sync_prison_location G1234AB MDI
"""

from django.core.management.base import BaseCommand

from convictions.services import CustodyUpdateService


class Command(BaseCommand):
    help = "Move the offender's active custodial sentences to the given prison."

    def add_arguments(self, parser):
        parser.add_argument("noms_number", help="NOMS number of the offender, e.g. G1234AB.")
        parser.add_argument("institution_code", help="NOMIS code of the prison, e.g. MDI.")

    def handle(self, *args, **options):
        noms_number = options["noms_number"]
        institution_code = options["institution_code"]

        result = CustodyUpdateService.sync_prison_location(noms_number, institution_code)

        if result.is_failure:
            self.stdout.write(self.style.WARNING(
                f"  ⚠  {result.reason.value}: {result.message}"
            ))
            return

        update = result.value
        self.stdout.write(self.style.SUCCESS(
            f"  ✔  {update.outcome.value}: {len(update.custodies)} custody record(s) "
            f"for {noms_number} at {institution_code}"
        ))
