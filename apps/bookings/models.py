"""Booking domain models for the guesthouse."""

from __future__ import annotations

import secrets
import string
from decimal import Decimal

from django.conf import settings  # type: ignore
from django.core.exceptions import ValidationError  # type: ignore
from django.db import models  # type: ignore
from django.utils import timezone  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from shared.domain.exceptions import InvalidTransition
from shared.domain.value_objects import DateRange

REFERENCE_ALPHABET = string.ascii_uppercase + string.digits
REFERENCE_SUFFIX_LENGTH = 6


class Booking(models.Model):
    """A reservation of one room unit for a date range."""

    class Status(models.TextChoices):
        PENDING = "pending", _("Pending")
        CONFIRMED = "confirmed", _("Confirmed")
        CANCELLED = "cancelled", _("Cancelled")
        CHECKED_IN = "checked-in", _("Checked in")
        CHECKED_OUT = "checked-out", _("Checked out")

    class PaymentStatus(models.TextChoices):
        PENDING = "pending", _("Pending")
        PAID = "paid", _("Paid")
        FAILED = "failed", _("Failed")
        REFUNDED = "refunded", _("Refunded")

    class Source(models.TextChoices):
        WEBSITE = "website", _("Website")
        ADMIN = "admin", _("Admin")
        PHONE = "phone", _("Phone")
        WALK_IN = "walk-in", _("Walk-in")

    # Status changes allowed for the normal flow; admin overrides go through force_status()
    TRANSITIONS = {
        Status.PENDING: {Status.CONFIRMED, Status.CANCELLED},
        Status.CONFIRMED: {Status.CHECKED_IN, Status.CANCELLED},
        Status.CHECKED_IN: {Status.CHECKED_OUT},
        Status.CHECKED_OUT: set(),
        Status.CANCELLED: set(),
    }
    CANCELLABLE = (Status.PENDING, Status.CONFIRMED)

    booking_reference = models.CharField(max_length=32, unique=True, editable=False)
    room_type = models.ForeignKey(
        "rooms.RoomType",
        on_delete=models.PROTECT,
        related_name="bookings",
    )
    room_unit = models.ForeignKey(
        "rooms.RoomUnit",
        on_delete=models.PROTECT,
        related_name="bookings",
    )
    room_type_name = models.CharField(max_length=150, blank=True)
    room_unit_number = models.CharField(max_length=20, blank=True)
    room_unit_name = models.CharField(max_length=200, blank=True)

    guest_name = models.CharField(max_length=150)
    guest_email = models.EmailField()
    guest_phone = models.CharField(max_length=40)
    guest_address = models.CharField(max_length=255, blank=True)
    guest_id_number = models.CharField(max_length=50, blank=True)

    checkin_date = models.DateField()
    checkout_date = models.DateField()
    number_of_guests = models.PositiveSmallIntegerField(default=1)
    nights = models.PositiveSmallIntegerField(default=1)
    price_multiplier = models.DecimalField(max_digits=6, decimal_places=3, default=Decimal("1.000"))
    seasonal_rule = models.CharField(max_length=100, blank=True)
    total_amount = models.DecimalField(max_digits=12, decimal_places=2, editable=False)
    currency = models.CharField(max_length=3, default="ZAR")

    status = models.CharField(max_length=20, choices=Status.choices, default=Status.PENDING)
    payment_status = models.CharField(
        max_length=20,
        choices=PaymentStatus.choices,
        default=PaymentStatus.PENDING,
    )
    payment_method = models.CharField(max_length=30, default="paystack")
    payment_id = models.CharField(max_length=100, blank=True)
    paid_at = models.DateTimeField(null=True, blank=True)
    refunded_at = models.DateTimeField(null=True, blank=True)

    guest_preferences = models.JSONField(default=dict, blank=True)
    special_requests = models.TextField(blank=True)
    source = models.CharField(max_length=20, choices=Source.choices, default=Source.WEBSITE)
    notes = models.TextField(blank=True, help_text=_("Internal notes, visible to admins only."))

    cancellation_reason = models.CharField(max_length=255, blank=True)
    cancelled_at = models.DateTimeField(null=True, blank=True)
    checked_in_at = models.DateTimeField(null=True, blank=True)
    checked_out_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Booking")
        verbose_name_plural = _("Bookings")
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(checkout_date__gt=models.F("checkin_date")),
                name="booking_valid_dates",
            ),
            models.CheckConstraint(
                condition=models.Q(number_of_guests__gte=1),
                name="booking_guest_count_positive",
            ),
        ]
        indexes = [
            models.Index(fields=["room_unit", "checkin_date", "checkout_date"]),
            models.Index(fields=["room_type", "status"]),
            models.Index(fields=["status", "payment_status"]),
            models.Index(fields=["guest_email"]),
        ]

    def __str__(self) -> str:
        return f"Booking {self.booking_reference} ({self.room_unit_name or self.room_unit_id})"

    def clean(self) -> None:
        if self.checkin_date and self.checkout_date and self.checkin_date >= self.checkout_date:
            raise ValidationError(_("Check-out date must be after check-in date."))

    def save(self, *args, **kwargs):  # type: ignore
        if self._state.adding:
            if not self.booking_reference:
                self.booking_reference = self.generate_reference()
            self.nights = (self.checkout_date - self.checkin_date).days
        elif self.pk is not None:
            # Prices are fixed at creation
            stored = type(self).objects.filter(pk=self.pk).values_list("total_amount", flat=True).first()
            if stored is not None and stored != self.total_amount:
                raise ValidationError(_("The total amount of a booking cannot be changed."))
        self.clean()
        super().save(*args, **kwargs)

    @staticmethod
    def generate_reference(prefix: str | None = None, today=None) -> str:
        prefix = prefix or settings.BOOKING_REFERENCE_PREFIX
        year = (today or timezone.localdate()).strftime("%y")
        suffix = "".join(secrets.choice(REFERENCE_ALPHABET) for _ in range(REFERENCE_SUFFIX_LENGTH))
        return f"{prefix}-{year}-{suffix}"

    @property
    def dates(self) -> DateRange:
        return DateRange(self.checkin_date, self.checkout_date)

    @property
    def is_cancelled(self) -> bool:
        return self.status == self.Status.CANCELLED

    @property
    def is_cancellable(self) -> bool:
        return self.status in self.CANCELLABLE

    def _ensure_transition(self, target: str) -> None:
        if target not in self.TRANSITIONS[self.Status(self.status)]:
            raise InvalidTransition(
                f"Cannot change booking {self.booking_reference} from {self.status} to {target}."
            )

    def mark_cancelled(self, reason: str = "") -> None:
        self._ensure_transition(self.Status.CANCELLED)
        self.status = self.Status.CANCELLED
        self.cancellation_reason = reason
        self.cancelled_at = timezone.now()
        self.save(update_fields=["status", "cancellation_reason", "cancelled_at", "updated_at"])

    def force_status(self, target: str) -> None:
        """Admin override to confirmed, checked-in or checked-out from any live state."""

        allowed = (self.Status.CONFIRMED, self.Status.CHECKED_IN, self.Status.CHECKED_OUT)
        if self.is_cancelled or target not in allowed:
            raise InvalidTransition(
                f"Cannot change booking {self.booking_reference} from {self.status} to {target}."
            )
        now = timezone.now()
        self.status = target
        fields = ["status", "updated_at"]
        if target in (self.Status.CHECKED_IN, self.Status.CHECKED_OUT) and not self.checked_in_at:
            self.checked_in_at = now
            fields.append("checked_in_at")
        if target == self.Status.CHECKED_OUT and not self.checked_out_at:
            self.checked_out_at = now
            fields.append("checked_out_at")
        self.save(update_fields=fields)

    def mark_refunded(self) -> None:
        if self.payment_status != self.PaymentStatus.PAID:
            raise InvalidTransition(f"Booking {self.booking_reference} has no captured payment to refund.")
        self.payment_status = self.PaymentStatus.REFUNDED
        self.refunded_at = timezone.now()
        self.save(update_fields=["payment_status", "refunded_at", "updated_at"])
