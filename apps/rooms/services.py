"""Catalog services: live counts, occupancy flags and admin inventory changes."""

from __future__ import annotations

import logging

from django.db import transaction  # type: ignore
from django.db.models import Count, Exists, OuterRef, Q  # type: ignore
from django.utils import timezone  # type: ignore

from .models import BlackoutPeriod, RoomType, RoomUnit, SeasonalPricing

logger = logging.getLogger(__name__)


def with_live_counts(queryset):
    """Annotate room types with unit counts read from the units table."""

    return queryset.annotate(
        live_total_units=Count("units", distinct=True),
        live_available_units=Count(
            "units",
            filter=Q(units__status=RoomUnit.Status.AVAILABLE),
            distinct=True,
        ),
    )


def with_occupancy(queryset, day=None):
    """Annotate units with whether a live booking covers the night of `day`."""

    from apps.bookings.models import Booking  # Local import to prevent circular dependency

    day = day or timezone.localdate()
    covering = Booking.objects.filter(
        room_unit=OuterRef("pk"),
        checkin_date__lte=day,
        checkout_date__gt=day,
    ).exclude(status__in=[Booking.Status.CANCELLED, Booking.Status.CHECKED_OUT])
    return queryset.annotate(occupied_today=Exists(covering))


def replace_seasonal_pricing(room_type: RoomType, entries: list[dict]) -> None:
    room_type.seasonal_pricing.all().delete()
    SeasonalPricing.objects.bulk_create(
        [SeasonalPricing(room_type=room_type, position=index, **entry) for index, entry in enumerate(entries)]
    )


def replace_blackout_dates(room_type: RoomType, entries: list[dict]) -> None:
    room_type.blackout_dates.all().delete()
    BlackoutPeriod.objects.bulk_create([BlackoutPeriod(room_type=room_type, **entry) for entry in entries])


def add_unit(room_type: RoomType, unit_number: str | None = None, **fields) -> RoomUnit:
    unit = RoomUnit.objects.create(
        room_type=room_type,
        unit_number=unit_number or room_type.next_unit_number(),
        **fields,
    )
    room_type.refresh_unit_counts()
    return unit


@transaction.atomic
def create_room_type(
    data: dict,
    *,
    unit_count: int = 1,
    seasonal_pricing: list[dict] | None = None,
    blackout_dates: list[dict] | None = None,
) -> RoomType:
    """Create a room type together with `unit_count` units numbered 001..N."""

    room_type = RoomType.objects.create(**data)
    if seasonal_pricing:
        replace_seasonal_pricing(room_type, seasonal_pricing)
    if blackout_dates:
        replace_blackout_dates(room_type, blackout_dates)
    for _ in range(unit_count):
        RoomUnit.objects.create(room_type=room_type, unit_number=room_type.next_unit_number())
    room_type.refresh_unit_counts()
    logger.info(f"Room type {room_type.name} created with {unit_count} units")
    return room_type


def refresh_all_unit_counts() -> int:
    refreshed = 0
    for room_type in RoomType.objects.all():
        room_type.refresh_unit_counts()
        refreshed += 1
    return refreshed
