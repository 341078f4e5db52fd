import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("convictions", "0001_initial"),
        ("core", "0001_initial"),
        ("offenders", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Contact",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="Created At")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="Updated At")),
                ("contact_date", models.DateField(verbose_name="Contact Date")),
                ("notes", models.TextField(blank=True, default="", verbose_name="Notes")),
                ("staff_code", models.CharField(blank=True, default="", max_length=20, verbose_name="Staff Code")),
                ("contact_type", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="+", to="core.standardreference", verbose_name="Contact Type")),
                ("created_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="+", to=settings.AUTH_USER_MODEL, verbose_name="Created By")),
                ("event", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="contacts", to="convictions.event", verbose_name="Event")),
                ("offender", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="contacts", to="offenders.offender", verbose_name="Offender")),
            ],
            options={
                "verbose_name": "Contact",
                "verbose_name_plural": "Contacts",
                "ordering": ["-contact_date", "-id"],
            },
        ),
    ]
