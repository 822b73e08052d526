"""Integration tests for availability checks against the booking ledger."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.bookings import services
from apps.bookings.models import Booking
from apps.rooms.models import BlackoutPeriod, RoomType, RoomUnit, SeasonalPricing
from apps.rooms.services import create_room_type


def make_booking(unit: RoomUnit, checkin: date, checkout: date, **overrides) -> Booking:
    values = {
        "room_type": unit.room_type,
        "room_unit": unit,
        "room_type_name": unit.room_type.name,
        "room_unit_number": unit.unit_number,
        "guest_name": "Thandi Mokoena",
        "guest_email": "thandi@example.com",
        "guest_phone": "+27820000000",
        "checkin_date": checkin,
        "checkout_date": checkout,
        "number_of_guests": 2,
        "total_amount": unit.room_type.price * (checkout - checkin).days,
    }
    values.update(overrides)
    return Booking.objects.create(**values)


class AvailabilityAPITests(APITestCase):
    """Covers the availability scenarios for a two-unit room type."""

    def setUp(self) -> None:
        self.room_type = create_room_type(
            {"name": "Deluxe Suite", "price": Decimal("1250.00"), "max_guests": 4},
            unit_count=2,
        )
        self.unit_1, self.unit_2 = list(self.room_type.units.order_by("unit_number"))
        self.url = reverse("room-type-check-availability", args=[self.room_type.pk])

    def _check(self, checkin: str, checkout: str, guests: int = 2):
        return self.client.post(
            self.url,
            {"checkinDate": checkin, "checkoutDate": checkout, "numberOfGuests": guests},
            format="json",
        )

    def test_overlapping_booking_leaves_one_unit(self) -> None:
        make_booking(self.unit_1, date(2024, 3, 1), date(2024, 3, 5))

        response = self._check("2024-03-02", "2024-03-04")

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertTrue(response.data["available"])
        self.assertEqual(response.data["availableUnits"], 1)
        self.assertEqual(response.data["totalUnits"], 2)
        self.assertEqual(response.data["roomType"]["name"], "Deluxe Suite")
        self.assertEqual(response.data["quote"]["totalAmount"], "2500.00")

        units = services.list_available_units(self.room_type.pk, date(2024, 3, 2), date(2024, 3, 4))
        self.assertEqual([unit.pk for unit in units], [self.unit_2.pk])

    def test_adjacent_stay_sees_both_units(self) -> None:
        make_booking(self.unit_1, date(2024, 3, 1), date(2024, 3, 5))

        response = self._check("2024-03-06", "2024-03-08")
        self.assertTrue(response.data["available"])
        self.assertEqual(response.data["availableUnits"], 2)

        # Checkout day of one stay is the check-in day of the next
        response = self._check("2024-03-05", "2024-03-07")
        self.assertEqual(response.data["availableUnits"], 2)

    def test_minimum_stay_rejection(self) -> None:
        self.room_type.min_stay = 2
        self.room_type.save(update_fields=["min_stay"])

        response = self._check("2024-03-10", "2024-03-11")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(response.data["available"])
        self.assertEqual(response.data["rule"], "stay_length")
        self.assertIn("Minimum stay", response.data["reason"])
        self.assertNotIn("quote", response.data)

    def test_capacity_rejected_before_inventory_is_read(self) -> None:
        with self.assertNumQueries(1):
            _room_type, result = services.check_availability(
                self.room_type.pk, date(2024, 3, 10), date(2024, 3, 12), 5
            )

        self.assertFalse(result.available)
        self.assertEqual(result.rule, "capacity_exceeded")
        self.assertEqual(result.reason, "This room type can only accommodate 4 guests.")

    def test_cancellation_frees_the_unit(self) -> None:
        first = make_booking(self.unit_1, date(2024, 3, 1), date(2024, 3, 5))
        make_booking(self.unit_2, date(2024, 3, 1), date(2024, 3, 5))

        response = self._check("2024-03-01", "2024-03-05")
        self.assertFalse(response.data["available"])
        self.assertEqual(response.data["rule"], "no_capacity")

        services.cancel_booking(first, "Plans changed")

        response = self._check("2024-03-01", "2024-03-05")
        self.assertTrue(response.data["available"])
        self.assertEqual(response.data["availableUnits"], 1)
        units = services.list_available_units(self.room_type.pk, date(2024, 3, 1), date(2024, 3, 5))
        self.assertEqual([unit.pk for unit in units], [self.unit_1.pk])

    def test_check_is_read_only(self) -> None:
        make_booking(self.unit_1, date(2024, 3, 1), date(2024, 3, 5))
        before = RoomType.objects.values("total_units", "available_units", "updated_at").get(pk=self.room_type.pk)

        for _ in range(3):
            self._check("2024-03-02", "2024-03-04")

        after = RoomType.objects.values("total_units", "available_units", "updated_at").get(pk=self.room_type.pk)
        self.assertEqual(before, after)
        self.assertEqual(Booking.objects.count(), 1)

    def test_unit_in_maintenance_is_excluded(self) -> None:
        self.unit_2.schedule_maintenance(date(2024, 3, 3), date(2024, 3, 3), "Geyser replacement")

        response = self._check("2024-03-01", "2024-03-04")
        self.assertEqual(response.data["availableUnits"], 1)
        self.assertEqual(response.data["totalUnits"], 1)

        response = self._check("2024-03-04", "2024-03-06")
        self.assertEqual(response.data["availableUnits"], 2)

    def test_blackout_and_inactive_rules(self) -> None:
        BlackoutPeriod.objects.create(
            room_type=self.room_type,
            start_date=date(2024, 12, 24),
            end_date=date(2024, 12, 26),
            reason="Christmas",
        )
        response = self._check("2024-12-26", "2024-12-28")
        self.assertEqual(response.data["rule"], "blackout")

        # Checking out on the first blackout day is refused as well
        response = self._check("2024-12-22", "2024-12-24")
        self.assertEqual(response.data["rule"], "blackout")
        response = self._check("2024-12-21", "2024-12-23")
        self.assertTrue(response.data["available"])

        self.room_type.is_active = False
        self.room_type.save(update_fields=["is_active"])
        _room_type, result = services.check_availability(self.room_type.pk, date(2024, 12, 1), date(2024, 12, 3))
        self.assertEqual(result.rule, "inactive")

    def test_quote_uses_seasonal_multiplier(self) -> None:
        SeasonalPricing.objects.create(
            room_type=self.room_type,
            name="Festive",
            start_date=date(2024, 12, 15),
            end_date=date(2025, 1, 5),
            price_multiplier=Decimal("1.200"),
        )

        response = self._check("2024-12-20", "2024-12-23")

        self.assertEqual(response.data["quote"]["totalAmount"], "4500.00")
        self.assertEqual(response.data["quote"]["seasonalRule"], "Festive")

    def test_invalid_dates_are_rejected(self) -> None:
        response = self._check("2024-03-05", "2024-03-05")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["code"], "invalid_date_range")

        response = self.client.post(self.url, {"checkinDate": "2024-03-05"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("checkoutDate", response.data["errors"])

    def test_unknown_room_type_is_404(self) -> None:
        url = reverse("room-type-check-availability", args=[self.room_type.pk + 100])

        response = self.client.post(url, {"checkinDate": "2024-03-01", "checkoutDate": "2024-03-03"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_available_units_endpoint(self) -> None:
        make_booking(self.unit_1, date(2024, 3, 1), date(2024, 3, 5))
        url = reverse("room-type-available-units", args=[self.room_type.pk])

        response = self.client.post(url, {"checkinDate": "2024-03-02", "checkoutDate": "2024-03-03"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual([unit["id"] for unit in response.data], [self.unit_2.pk])
