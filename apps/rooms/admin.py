"""Admin registration for the room catalog."""

from __future__ import annotations

from django.contrib import admin

from .models import BlackoutPeriod, RoomType, RoomUnit, SeasonalPricing


class SeasonalPricingInline(admin.TabularInline):
    model = SeasonalPricing
    extra = 0


class BlackoutPeriodInline(admin.TabularInline):
    model = BlackoutPeriod
    extra = 0


class RoomUnitInline(admin.TabularInline):
    model = RoomUnit
    extra = 0
    fields = ("unit_number", "floor", "status", "maintenance_start_date", "maintenance_end_date")


@admin.register(RoomType)
class RoomTypeAdmin(admin.ModelAdmin):
    list_display = (
        "name",
        "price",
        "currency",
        "max_guests",
        "min_stay",
        "max_stay",
        "total_units",
        "available_units",
        "is_active",
    )
    list_filter = ("is_active",)
    search_fields = ("name", "slug")
    readonly_fields = ("slug", "total_units", "available_units", "created_at", "updated_at")
    inlines = [SeasonalPricingInline, BlackoutPeriodInline, RoomUnitInline]


@admin.register(RoomUnit)
class RoomUnitAdmin(admin.ModelAdmin):
    list_display = ("unit_number", "unit_name", "room_type", "floor", "status", "last_cleaned")
    list_filter = ("status", "room_type")
    search_fields = ("unit_number", "unit_name")
    readonly_fields = ("unit_name", "created_at", "updated_at")
