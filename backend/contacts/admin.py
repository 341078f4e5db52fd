from django.contrib import admin

from .models import Contact


@admin.register(Contact)
class ContactAdmin(admin.ModelAdmin):
    list_display = ("offender", "event", "contact_type", "contact_date",
                    "staff_code")
    list_filter = ("contact_type",)
    search_fields = ("offender__crn", "notes")
