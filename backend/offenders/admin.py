from django.contrib import admin

from .models import Offender, OffenderPrisoner, PrisonOffenderManager


class PrisonOffenderManagerInline(admin.TabularInline):
    model = PrisonOffenderManager
    extra = 0


class OffenderPrisonerInline(admin.TabularInline):
    model = OffenderPrisoner
    extra = 0
    readonly_fields = ("prisoner_number", "event_id")


@admin.register(Offender)
class OffenderAdmin(admin.ModelAdmin):
    list_display = ("crn", "noms_number", "first_name", "surname",
                    "current_disposal", "soft_deleted")
    list_filter = ("current_disposal", "soft_deleted")
    search_fields = ("crn", "noms_number", "surname")
    inlines = [PrisonOffenderManagerInline, OffenderPrisonerInline]


@admin.register(PrisonOffenderManager)
class PrisonOffenderManagerAdmin(admin.ModelAdmin):
    list_display = ("offender", "institution", "staff_code",
                    "allocation_date", "end_date", "active")
    list_filter = ("active",)
