from django.contrib import admin

from .models import Custody, CustodyHistory, Event, KeyDate


class CustodyInline(admin.StackedInline):
    model = Custody
    extra = 0


class KeyDateInline(admin.TabularInline):
    model = KeyDate
    extra = 0
    readonly_fields = ("created_datetime", "created_by",
                       "last_updated_datetime", "last_updated_by")


class CustodyHistoryInline(admin.TabularInline):
    model = CustodyHistory
    extra = 0
    can_delete = False
    readonly_fields = ("custody_event_type", "detail", "when", "created_at")

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Event)
class EventAdmin(admin.ModelAdmin):
    list_display = ("id", "offender", "event_number", "active_flag",
                    "sentence_start_date", "sentence_termination_date")
    list_filter = ("active_flag", "soft_deleted")
    search_fields = ("offender__crn", "offender__noms_number")
    inlines = [CustodyInline]


@admin.register(Custody)
class CustodyAdmin(admin.ModelAdmin):
    list_display = ("event", "custodial_status", "institution",
                    "prisoner_number", "location_change_date")
    list_filter = ("custodial_status",)
    search_fields = ("prisoner_number", "event__offender__crn")
    inlines = [KeyDateInline, CustodyHistoryInline]
