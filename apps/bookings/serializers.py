"""Serializers for the booking domain."""

from __future__ import annotations

from django.utils import timezone  # type: ignore
from rest_framework import serializers  # type: ignore

from .domain.selection import GuestPreferences
from .models import Booking
from .services import BookingRequest, GuestDetails


class GuestPreferencesSerializer(serializers.Serializer):
    smoking = serializers.BooleanField(required=False, default=False)
    accessibility = serializers.BooleanField(required=False, default=False)
    floor = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=10, default="")
    view = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=50, default="")


class BookingCreateSerializer(serializers.Serializer):
    """Request body of the public booking-with-payment endpoint."""

    roomTypeId = serializers.IntegerField(min_value=1)
    roomUnitId = serializers.IntegerField(min_value=1, required=False, allow_null=True)
    guestName = serializers.CharField(max_length=150)
    guestEmail = serializers.EmailField()
    guestPhone = serializers.CharField(max_length=40)
    guestAddress = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")
    guestIdNumber = serializers.CharField(max_length=50, required=False, allow_blank=True, default="")
    checkinDate = serializers.DateField()
    checkoutDate = serializers.DateField()
    numberOfGuests = serializers.IntegerField(min_value=1)
    specialRequests = serializers.CharField(required=False, allow_blank=True, default="")
    guestPreferences = GuestPreferencesSerializer(required=False)

    def validate_checkinDate(self, value):  # type: ignore
        if value < timezone.localdate():
            raise serializers.ValidationError("Check-in date cannot be in the past.")
        return value

    def validate(self, attrs):  # type: ignore
        if attrs["checkoutDate"] <= attrs["checkinDate"]:
            raise serializers.ValidationError({"checkoutDate": "Check-out date must be after check-in date."})
        return attrs

    def to_booking_request(self, source: str = Booking.Source.WEBSITE) -> BookingRequest:
        data = self.validated_data
        return BookingRequest(
            room_type_id=data["roomTypeId"],
            room_unit_id=data.get("roomUnitId"),
            checkin=data["checkinDate"],
            checkout=data["checkoutDate"],
            guest_count=data["numberOfGuests"],
            guest=GuestDetails(
                name=data["guestName"].strip(),
                email=data["guestEmail"].strip().lower(),
                phone=data["guestPhone"].strip(),
                address=data.get("guestAddress", ""),
                id_number=data.get("guestIdNumber", ""),
            ),
            preferences=GuestPreferences.from_dict(data.get("guestPreferences")),
            special_requests=data.get("specialRequests", ""),
            source=source,
        )


class AdminBookingCreateSerializer(BookingCreateSerializer):
    """Bookings taken by phone or at the desk; no checkout is opened."""

    source = serializers.ChoiceField(choices=Booking.Source.choices, required=False, default=Booking.Source.ADMIN)
    notes = serializers.CharField(required=False, allow_blank=True, default="")

    def validate_checkinDate(self, value):  # type: ignore
        # Walk-ins and back-dated corrections are allowed for staff
        return value


class BookingSerializer(serializers.ModelSerializer):
    """Booking as shown to the guest."""

    bookingReference = serializers.ReadOnlyField(source="booking_reference")
    roomTypeId = serializers.ReadOnlyField(source="room_type_id")
    roomUnitId = serializers.ReadOnlyField(source="room_unit_id")
    roomTypeName = serializers.ReadOnlyField(source="room_type_name")
    roomUnitNumber = serializers.ReadOnlyField(source="room_unit_number")
    roomUnitName = serializers.ReadOnlyField(source="room_unit_name")
    guestName = serializers.ReadOnlyField(source="guest_name")
    guestEmail = serializers.ReadOnlyField(source="guest_email")
    guestPhone = serializers.ReadOnlyField(source="guest_phone")
    checkinDate = serializers.ReadOnlyField(source="checkin_date")
    checkoutDate = serializers.ReadOnlyField(source="checkout_date")
    numberOfGuests = serializers.ReadOnlyField(source="number_of_guests")
    priceMultiplier = serializers.DecimalField(source="price_multiplier", max_digits=6, decimal_places=3, read_only=True)
    seasonalRule = serializers.ReadOnlyField(source="seasonal_rule")
    totalAmount = serializers.DecimalField(source="total_amount", max_digits=12, decimal_places=2, read_only=True)
    paymentStatus = serializers.ReadOnlyField(source="payment_status")
    paymentMethod = serializers.ReadOnlyField(source="payment_method")
    paidAt = serializers.ReadOnlyField(source="paid_at")
    guestPreferences = serializers.ReadOnlyField(source="guest_preferences")
    specialRequests = serializers.ReadOnlyField(source="special_requests")
    cancellationReason = serializers.ReadOnlyField(source="cancellation_reason")
    cancelledAt = serializers.ReadOnlyField(source="cancelled_at")
    checkedInAt = serializers.ReadOnlyField(source="checked_in_at")
    checkedOutAt = serializers.ReadOnlyField(source="checked_out_at")
    createdAt = serializers.ReadOnlyField(source="created_at")
    updatedAt = serializers.ReadOnlyField(source="updated_at")

    class Meta:
        model = Booking
        fields = [
            "id",
            "bookingReference",
            "roomTypeId",
            "roomUnitId",
            "roomTypeName",
            "roomUnitNumber",
            "roomUnitName",
            "guestName",
            "guestEmail",
            "guestPhone",
            "checkinDate",
            "checkoutDate",
            "numberOfGuests",
            "nights",
            "priceMultiplier",
            "seasonalRule",
            "totalAmount",
            "currency",
            "status",
            "paymentStatus",
            "paymentMethod",
            "paidAt",
            "guestPreferences",
            "specialRequests",
            "source",
            "cancellationReason",
            "cancelledAt",
            "checkedInAt",
            "checkedOutAt",
            "createdAt",
            "updatedAt",
        ]
        read_only_fields = fields


class AdminBookingSerializer(BookingSerializer):
    guestAddress = serializers.ReadOnlyField(source="guest_address")
    guestIdNumber = serializers.ReadOnlyField(source="guest_id_number")
    paymentId = serializers.ReadOnlyField(source="payment_id")
    refundedAt = serializers.ReadOnlyField(source="refunded_at")

    class Meta(BookingSerializer.Meta):
        fields = BookingSerializer.Meta.fields + [
            "guestAddress",
            "guestIdNumber",
            "paymentId",
            "refundedAt",
            "notes",
        ]
        read_only_fields = fields


class AdminBookingUpdateSerializer(serializers.Serializer):
    """PATCH body for admins: status override and internal notes. Prices cannot be edited."""

    status = serializers.ChoiceField(choices=Booking.Status.choices, required=False)
    notes = serializers.CharField(required=False, allow_blank=True)
    specialRequests = serializers.CharField(required=False, allow_blank=True)
    cancellationReason = serializers.CharField(required=False, allow_blank=True, max_length=255)


class GuestCancelSerializer(serializers.Serializer):
    guestEmail = serializers.EmailField()
    reason = serializers.CharField(required=False, allow_blank=True, max_length=255, default="")


class ReasonSerializer(serializers.Serializer):
    reason = serializers.CharField(required=False, allow_blank=True, max_length=255, default="")
