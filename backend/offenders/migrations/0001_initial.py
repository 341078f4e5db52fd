import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("core", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Offender",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="Created At")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="Updated At")),
                ("crn", models.CharField(help_text="Case reference number.", max_length=7, unique=True, verbose_name="CRN")),
                ("noms_number", models.CharField(blank=True, db_index=True, default="", max_length=7, verbose_name="NOMS Number")),
                ("first_name", models.CharField(blank=True, default="", max_length=35, verbose_name="First Name")),
                ("surname", models.CharField(blank=True, default="", max_length=35, verbose_name="Surname")),
                ("current_disposal", models.BooleanField(default=False, verbose_name="Currently Sentenced")),
                ("most_recent_prisoner_number", models.CharField(blank=True, default="", max_length=35, verbose_name="Most Recent Prisoner Number")),
                ("soft_deleted", models.BooleanField(default=False, verbose_name="Soft Deleted")),
            ],
            options={
                "verbose_name": "Offender",
                "verbose_name_plural": "Offenders",
                "ordering": ["crn"],
            },
        ),
        migrations.CreateModel(
            name="PrisonOffenderManager",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="Created At")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="Updated At")),
                ("staff_code", models.CharField(max_length=20, verbose_name="Staff Code")),
                ("allocation_date", models.DateField(verbose_name="Allocation Date")),
                ("allocation_reason", models.CharField(blank=True, default="", max_length=255, verbose_name="Allocation Reason")),
                ("end_date", models.DateField(blank=True, null=True, verbose_name="End Date")),
                ("active", models.BooleanField(default=True, verbose_name="Active")),
                ("institution", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="prison_offender_managers", to="core.institution", verbose_name="Institution")),
                ("offender", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="prison_offender_managers", to="offenders.offender", verbose_name="Offender")),
            ],
            options={
                "verbose_name": "Prison Offender Manager",
                "verbose_name_plural": "Prison Offender Managers",
                "ordering": ["-allocation_date", "-id"],
            },
        ),
        migrations.CreateModel(
            name="OffenderPrisoner",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("prisoner_number", models.CharField(max_length=35, verbose_name="Prisoner Number")),
                ("event_id", models.PositiveIntegerField(blank=True, null=True, verbose_name="Event ID")),
                ("offender", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="prisoners", to="offenders.offender", verbose_name="Offender")),
            ],
            options={
                "verbose_name": "Offender Prisoner",
                "verbose_name_plural": "Offender Prisoners",
                "unique_together": {("offender", "prisoner_number")},
            },
        ),
    ]
