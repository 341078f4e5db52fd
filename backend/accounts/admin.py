from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from .models import User


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    list_display = ("username", "email", "first_name", "last_name",
                    "staff_code", "is_active", "is_staff")
    search_fields = ("username", "email", "staff_code")
    fieldsets = BaseUserAdmin.fieldsets + (
        ("Case System", {"fields": ("staff_code",)}),
    )
