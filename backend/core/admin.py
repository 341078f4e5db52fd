from django.contrib import admin

from .models import Institution, OutboundNotification, StandardReference


@admin.register(StandardReference)
class StandardReferenceAdmin(admin.ModelAdmin):
    list_display = ("set_name", "code_value", "code_description", "active")
    list_filter = ("set_name", "active")
    search_fields = ("code_value", "code_description")


@admin.register(Institution)
class InstitutionAdmin(admin.ModelAdmin):
    list_display = ("code", "description", "establishment")
    search_fields = ("code", "description")


@admin.register(OutboundNotification)
class OutboundNotificationAdmin(admin.ModelAdmin):
    list_display = ("feed", "message_type", "object_id", "delivered", "created_at")
    list_filter = ("feed", "message_type", "delivered")
    readonly_fields = ("feed", "message_type", "payload", "content_type",
                       "object_id", "created_at")
