"""Tests for the admin dashboard statistics endpoint."""

from __future__ import annotations

from datetime import timedelta
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from apps.bookings.models import Booking
from apps.rooms.services import create_room_type

User = get_user_model()


class StatsAPITests(APITestCase):
    def setUp(self) -> None:
        self.room_type = create_room_type(
            {"name": "Standard Double Room", "price": Decimal("850.00")},
            unit_count=4,
        )
        self.units = list(self.room_type.units.all())
        self.today = timezone.localdate()
        self.client.force_authenticate(User.objects.create_user(username="manager", is_staff=True))

    def _booking(self, unit, checkin, nights=2, **fields) -> Booking:
        values = {
            "room_type": self.room_type,
            "room_unit": unit,
            "guest_name": "Guest",
            "guest_email": "guest@example.com",
            "guest_phone": "+27860000000",
            "checkin_date": checkin,
            "checkout_date": checkin + timedelta(days=nights),
            "nights": nights,
            "total_amount": Decimal("850.00") * nights,
        }
        values.update(fields)
        return Booking.objects.create(**values)

    def test_requires_admin(self) -> None:
        self.client.force_authenticate(None)

        response = self.client.get(reverse("admin-stats"))

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_empty_dashboard(self) -> None:
        response = self.client.get(reverse("admin-stats"))

        self.assertEqual(
            response.data,
            {
                "totalBookings": 0,
                "monthlyRevenue": "0.00",
                "currency": "ZAR",
                "occupancyRate": 0.0,
                "pendingPayments": 0,
            },
        )

    def test_figures(self) -> None:
        yesterday = self.today - timedelta(days=1)
        # In house tonight, paid
        self._booking(
            self.units[0],
            yesterday,
            status=Booking.Status.CHECKED_IN,
            payment_status=Booking.PaymentStatus.PAID,
        )
        # Pending payment, arriving today
        self._booking(self.units[1], self.today)
        # Failed payment, future stay
        self._booking(self.units[2], self.today + timedelta(days=10), payment_status=Booking.PaymentStatus.FAILED)
        # Cancelled bookings count in the total only
        self._booking(self.units[3], yesterday, status=Booking.Status.CANCELLED)
        # Already checked out early
        self._booking(self.units[3], yesterday, nights=3, status=Booking.Status.CHECKED_OUT)

        response = self.client.get(reverse("admin-stats"))

        self.assertEqual(response.data["totalBookings"], 5)
        self.assertEqual(response.data["monthlyRevenue"], "7650.00")
        self.assertEqual(response.data["occupancyRate"], 50.0)
        self.assertEqual(response.data["pendingPayments"], 2)

    def test_revenue_ignores_earlier_months(self) -> None:
        booking = self._booking(self.units[0], self.today + timedelta(days=3))
        Booking.objects.filter(pk=booking.pk).update(created_at=timezone.now() - timedelta(days=40))

        response = self.client.get(reverse("admin-stats"))

        self.assertEqual(response.data["monthlyRevenue"], "0.00")
        self.assertEqual(response.data["totalBookings"], 1)
