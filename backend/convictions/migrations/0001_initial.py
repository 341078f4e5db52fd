import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("core", "0001_initial"),
        ("offenders", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Event",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="Created At")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="Updated At")),
                ("event_number", models.CharField(max_length=10, verbose_name="Event Number")),
                ("active_flag", models.BooleanField(default=True, verbose_name="Active")),
                ("soft_deleted", models.BooleanField(default=False, verbose_name="Soft Deleted")),
                ("conviction_date", models.DateField(blank=True, null=True, verbose_name="Conviction Date")),
                ("sentence_start_date", models.DateField(blank=True, null=True, verbose_name="Sentence Start Date")),
                ("sentence_termination_date", models.DateField(blank=True, null=True, verbose_name="Sentence Termination Date")),
                ("offender", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="events", to="offenders.offender", verbose_name="Offender")),
            ],
            options={
                "verbose_name": "Event",
                "verbose_name_plural": "Events",
                "ordering": ["offender_id", "event_number"],
            },
        ),
        migrations.CreateModel(
            name="Custody",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="Created At")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="Updated At")),
                ("custodial_status", models.CharField(blank=True, choices=[("A", "Sentenced - In Custody"), ("D", "In Custody"), ("B", "Released - On Licence"), ("C", "In Custody - Recalled"), ("T", "Terminated"), ("P", "Post Sentence Supervision"), ("-1", "Migrated Data"), ("R", "In Custody - RoTL"), ("I", "In Custody - IRC"), ("AT", "Auto Terminated")], max_length=2, null=True, verbose_name="Custodial Status")),
                ("prisoner_number", models.CharField(blank=True, db_index=True, default="", max_length=35, verbose_name="Prisoner (Booking) Number")),
                ("status_change_date", models.DateField(blank=True, null=True, verbose_name="Status Change Date")),
                ("location_change_date", models.DateField(blank=True, null=True, verbose_name="Location Change Date")),
                ("soft_deleted", models.BooleanField(default=False, verbose_name="Soft Deleted")),
                ("event", models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name="custody", to="convictions.event", verbose_name="Event")),
                ("institution", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name="custodies", to="core.institution", verbose_name="Institution")),
            ],
            options={
                "verbose_name": "Custody",
                "verbose_name_plural": "Custodies",
            },
        ),
        migrations.CreateModel(
            name="KeyDate",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("key_date", models.DateField(verbose_name="Key Date")),
                ("created_datetime", models.DateTimeField(verbose_name="Created At")),
                ("last_updated_datetime", models.DateTimeField(verbose_name="Last Updated At")),
                ("created_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="+", to=settings.AUTH_USER_MODEL, verbose_name="Created By")),
                ("custody", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="key_dates", to="convictions.custody", verbose_name="Custody")),
                ("key_date_type", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="+", to="core.standardreference", verbose_name="Key Date Type")),
                ("last_updated_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="+", to=settings.AUTH_USER_MODEL, verbose_name="Last Updated By")),
            ],
            options={
                "verbose_name": "Key Date",
                "verbose_name_plural": "Key Dates",
                "ordering": ["custody_id", "id"],
                "unique_together": {("custody", "key_date_type")},
            },
        ),
        migrations.CreateModel(
            name="CustodyHistory",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("detail", models.TextField(blank=True, default="", verbose_name="Detail")),
                ("when", models.DateField(verbose_name="Date")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="Created At")),
                ("custody", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="history", to="convictions.custody", verbose_name="Custody")),
                ("custody_event_type", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="+", to="core.standardreference", verbose_name="Custody Event Type")),
                ("offender", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="custody_history", to="offenders.offender", verbose_name="Offender")),
            ],
            options={
                "verbose_name": "Custody History",
                "verbose_name_plural": "Custody History",
                "ordering": ["created_at", "id"],
            },
        ),
    ]
