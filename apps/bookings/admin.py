"""Admin registration for bookings."""

from __future__ import annotations

from django.contrib import admin

from .models import Booking


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = (
        "booking_reference",
        "guest_name",
        "room_type_name",
        "room_unit_number",
        "status",
        "payment_status",
        "checkin_date",
        "checkout_date",
        "total_amount",
        "created_at",
    )
    list_filter = ("status", "payment_status", "source", "room_type", "checkin_date")
    search_fields = ("booking_reference", "guest_name", "guest_email", "guest_phone")
    date_hierarchy = "checkin_date"
    readonly_fields = (
        "booking_reference",
        "nights",
        "price_multiplier",
        "seasonal_rule",
        "total_amount",
        "paid_at",
        "refunded_at",
        "cancelled_at",
        "checked_in_at",
        "checked_out_at",
        "created_at",
        "updated_at",
    )
