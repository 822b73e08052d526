"""FilterSet definitions for the admin room unit listing."""

from __future__ import annotations

import django_filters  # type: ignore

from .models import RoomUnit


class RoomUnitFilterSet(django_filters.FilterSet):
    roomType = django_filters.NumberFilter(field_name="room_type_id", lookup_expr="exact")
    status = django_filters.ChoiceFilter(field_name="status", choices=RoomUnit.Status.choices)
    floor = django_filters.CharFilter(field_name="floor", lookup_expr="exact")

    class Meta:
        model = RoomUnit
        fields = ["roomType", "status", "floor"]
