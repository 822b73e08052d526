"""Admin registration for contact messages."""

from __future__ import annotations

from django.contrib import admin

from .models import ContactMessage


@admin.register(ContactMessage)
class ContactMessageAdmin(admin.ModelAdmin):
    list_display = ("subject", "first_name", "last_name", "email", "is_read", "created_at")
    list_filter = ("is_read", "created_at")
    search_fields = ("subject", "email", "first_name", "last_name", "message")
    readonly_fields = ("created_at", "updated_at")
