"""API views for analytics.

Provides the admin dashboard figures: total bookings, revenue booked in
the current month, today's occupancy across all room units and the
number of bookings still waiting for payment.
"""

from __future__ import annotations

from decimal import Decimal

from django.conf import settings  # type: ignore
from django.db import models  # type: ignore
from django.utils import timezone  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import APIView  # type: ignore

from apps.bookings.models import Booking
from apps.rooms.models import RoomUnit
from apps.users.api.permissions import IsGuesthouseAdmin


class StatsView(APIView):
    """Return headline statistics for the admin dashboard."""

    permission_classes = [IsGuesthouseAdmin]

    def get(self, request, format=None):  # type: ignore
        today = timezone.localdate()
        month_start = today.replace(day=1)
        live = Booking.objects.exclude(status=Booking.Status.CANCELLED)

        total_bookings = Booking.objects.count()
        monthly_revenue = (
            live.filter(created_at__date__gte=month_start).aggregate(total=models.Sum("total_amount")).get("total")
            or Decimal("0")
        )

        total_units = RoomUnit.objects.count()
        occupied_units = (
            live.exclude(status=Booking.Status.CHECKED_OUT)
            .filter(checkin_date__lte=today, checkout_date__gt=today)
            .values("room_unit_id")
            .distinct()
            .count()
        )
        occupancy_rate = round(occupied_units / total_units * 100, 1) if total_units else 0.0

        pending_payments = Booking.objects.filter(
            status=Booking.Status.PENDING,
            payment_status__in=[Booking.PaymentStatus.PENDING, Booking.PaymentStatus.FAILED],
        ).count()

        return Response(
            {
                "totalBookings": total_bookings,
                "monthlyRevenue": f"{monthly_revenue:.2f}",
                "currency": settings.DEFAULT_CURRENCY,
                "occupancyRate": occupancy_rate,
                "pendingPayments": pending_payments,
            }
        )
