"""FilterSet for the admin booking listing."""

from __future__ import annotations

import django_filters  # type: ignore
from django.db.models import Q  # type: ignore

from .models import Booking


class BookingFilterSet(django_filters.FilterSet):
    status = django_filters.ChoiceFilter(field_name="status", choices=Booking.Status.choices)
    paymentStatus = django_filters.ChoiceFilter(field_name="payment_status", choices=Booking.PaymentStatus.choices)
    roomType = django_filters.NumberFilter(field_name="room_type_id")
    checkinFrom = django_filters.DateFilter(field_name="checkin_date", lookup_expr="gte")
    checkinTo = django_filters.DateFilter(field_name="checkin_date", lookup_expr="lte")
    search = django_filters.CharFilter(method="filter_search")

    class Meta:
        model = Booking
        fields = ["status", "paymentStatus", "roomType", "checkinFrom", "checkinTo", "search"]

    def filter_search(self, queryset, name, value):  # type: ignore
        value = value.strip()
        if not value:
            return queryset
        return queryset.filter(
            Q(booking_reference__icontains=value)
            | Q(guest_name__icontains=value)
            | Q(guest_email__icontains=value)
            | Q(guest_phone__icontains=value)
        )
