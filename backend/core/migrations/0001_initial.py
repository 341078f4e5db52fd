import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("contenttypes", "0002_remove_content_type_name"),
    ]

    operations = [
        migrations.CreateModel(
            name="StandardReference",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("set_name", models.CharField(db_index=True, max_length=50, verbose_name="Reference Set")),
                ("code_value", models.CharField(max_length=20, verbose_name="Code")),
                ("code_description", models.CharField(max_length=255, verbose_name="Description")),
                ("active", models.BooleanField(default=True, verbose_name="Active")),
            ],
            options={
                "verbose_name": "Standard Reference",
                "verbose_name_plural": "Standard References",
                "ordering": ["set_name", "code_value"],
                "unique_together": {("set_name", "code_value")},
            },
        ),
        migrations.CreateModel(
            name="Institution",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("code", models.CharField(max_length=10, unique=True, verbose_name="NOMIS Code")),
                ("description", models.CharField(max_length=255, verbose_name="Description")),
                ("establishment", models.BooleanField(default=True, verbose_name="Establishment")),
            ],
            options={
                "verbose_name": "Institution",
                "verbose_name_plural": "Institutions",
                "ordering": ["code"],
            },
        ),
        migrations.CreateModel(
            name="OutboundNotification",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="Created At")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="Updated At")),
                ("feed", models.CharField(choices=[("spg", "SPG"), ("iaps", "IAPS")], max_length=10, verbose_name="Feed")),
                ("message_type", models.CharField(db_index=True, max_length=50, verbose_name="Message Type")),
                ("payload", models.JSONField(blank=True, default=dict, verbose_name="Payload")),
                ("delivered", models.BooleanField(default=False, verbose_name="Delivered")),
                ("object_id", models.PositiveIntegerField(blank=True, null=True, verbose_name="Related Object ID")),
                ("content_type", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, to="contenttypes.contenttype", verbose_name="Related Content Type")),
            ],
            options={
                "verbose_name": "Outbound Notification",
                "verbose_name_plural": "Outbound Notifications",
                "ordering": ["created_at", "id"],
                "indexes": [models.Index(fields=["feed", "delivered"], name="core_outbox_feed_delivered_idx")],
            },
        ),
    ]
