"""Room catalog models for the guesthouse.

A RoomType describes a class of room (price, capacity, stay limits,
seasonal pricing, blackout windows). Each RoomType owns a number of
RoomUnits, the physical rooms a booking is allocated to.
"""

from __future__ import annotations

from decimal import Decimal

from django.conf import settings  # type: ignore
from django.core.validators import MinValueValidator  # type: ignore
from django.db import models  # type: ignore
from django.utils.text import slugify  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from shared.domain.value_objects import CalendarWindow


def _default_currency() -> str:
    return settings.DEFAULT_CURRENCY


class RoomType(models.Model):
    """A bookable class of room, e.g. "Deluxe Suite"."""

    name = models.CharField(max_length=150, unique=True)
    slug = models.SlugField(max_length=160, unique=True, blank=True)
    description = models.TextField(blank=True)
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
        help_text=_("Base price per night."),
    )
    currency = models.CharField(max_length=3, default=_default_currency)
    max_guests = models.PositiveSmallIntegerField(default=2, validators=[MinValueValidator(1)])
    amenities = models.JSONField(default=list, blank=True)
    images = models.JSONField(default=list, blank=True)
    features = models.JSONField(default=list, blank=True)
    size = models.CharField(max_length=50, blank=True)
    bed_type = models.CharField(max_length=50, blank=True)
    view = models.CharField(max_length=50, blank=True)
    cancellation_policy = models.CharField(
        max_length=255,
        default="Free cancellation up to 24 hours before check-in",
    )
    is_active = models.BooleanField(default=True)
    total_units = models.PositiveSmallIntegerField(
        default=0,
        help_text=_("Cached unit count, display only."),
    )
    available_units = models.PositiveSmallIntegerField(
        default=0,
        help_text=_("Cached count of units in service, display only."),
    )
    min_stay = models.PositiveSmallIntegerField(default=1, validators=[MinValueValidator(1)])
    max_stay = models.PositiveSmallIntegerField(default=30, validators=[MinValueValidator(1)])
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Room type")
        verbose_name_plural = _("Room types")
        ordering = ["price", "name"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(max_guests__gte=1),
                name="room_type_max_guests_positive",
            ),
            models.CheckConstraint(
                condition=models.Q(min_stay__gte=1) & models.Q(max_stay__gte=models.F("min_stay")),
                name="room_type_stay_bounds_valid",
            ),
        ]
        indexes = [
            models.Index(fields=["is_active"]),
        ]

    def __str__(self) -> str:
        return self.name

    def save(self, *args, **kwargs):  # type: ignore
        if not self.slug:
            base_slug = slugify(self.name)[:150] or "room"
            candidate = base_slug
            counter = 1
            while self.__class__.objects.filter(slug=candidate).exclude(pk=self.pk).exists():
                counter += 1
                candidate = f"{base_slug}-{counter}"
            self.slug = candidate
        super().save(*args, **kwargs)

    def refresh_unit_counts(self) -> None:
        """Recompute the cached counters from live unit status."""

        units = self.units.all()
        self.total_units = units.count()
        self.available_units = units.filter(status=RoomUnit.Status.AVAILABLE).count()
        self.save(update_fields=["total_units", "available_units", "updated_at"])

    def next_unit_number(self) -> str:
        """Next free three digit unit number, scoped by the room type slug when taken."""

        position = self.units.count() + 1
        while True:
            candidate = f"{position:03d}"
            if RoomUnit.objects.filter(unit_number=candidate).exists():
                candidate = f"{self.slug}-{position:03d}"
            if not RoomUnit.objects.filter(unit_number=candidate).exists():
                return candidate
            position += 1


class SeasonalPricing(models.Model):
    """Multiplier applied to the base price for stays starting in a window."""

    room_type = models.ForeignKey(
        RoomType,
        on_delete=models.CASCADE,
        related_name="seasonal_pricing",
    )
    name = models.CharField(max_length=100)
    start_date = models.DateField()
    end_date = models.DateField(help_text=_("Last day of the season, inclusive."))
    price_multiplier = models.DecimalField(
        max_digits=6,
        decimal_places=3,
        default=Decimal("1.000"),
        help_text=_("1.200 means 20% above the base price."),
    )
    is_active = models.BooleanField(default=True)
    position = models.PositiveSmallIntegerField(default=0)

    class Meta:
        verbose_name = _("Seasonal pricing")
        verbose_name_plural = _("Seasonal pricing")
        ordering = ["position", "id"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(end_date__gte=models.F("start_date")),
                name="seasonal_pricing_valid_date_range",
            ),
            models.CheckConstraint(
                condition=models.Q(price_multiplier__gt=0),
                name="seasonal_pricing_multiplier_positive",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.room_type.name}: {self.name} ({self.start_date} - {self.end_date})"

    def applies_to(self, day) -> bool:
        return self.is_active and self.start_date <= day <= self.end_date


class BlackoutPeriod(models.Model):
    """Calendar days on which a room type cannot be booked."""

    room_type = models.ForeignKey(
        RoomType,
        on_delete=models.CASCADE,
        related_name="blackout_dates",
    )
    start_date = models.DateField()
    end_date = models.DateField(help_text=_("Last blocked night, inclusive."))
    reason = models.CharField(max_length=255, blank=True)

    class Meta:
        verbose_name = _("Blackout period")
        verbose_name_plural = _("Blackout periods")
        ordering = ["start_date", "id"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(end_date__gte=models.F("start_date")),
                name="blackout_valid_date_range",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.room_type.name}: {self.start_date} - {self.end_date}"

    @property
    def dates(self) -> CalendarWindow:
        return CalendarWindow(self.start_date, self.end_date)


class RoomUnit(models.Model):
    """A physical room belonging to exactly one RoomType."""

    class Status(models.TextChoices):
        AVAILABLE = "available", _("Available")
        OCCUPIED = "occupied", _("Occupied")
        MAINTENANCE = "maintenance", _("Maintenance")
        OUT_OF_ORDER = "out-of-order", _("Out of order")
        CLEANING = "cleaning", _("Cleaning")

    room_type = models.ForeignKey(
        RoomType,
        on_delete=models.CASCADE,
        related_name="units",
    )
    unit_number = models.CharField(max_length=20, unique=True)
    unit_name = models.CharField(max_length=200, blank=True)
    floor = models.CharField(max_length=10, blank=True)
    special_features = models.JSONField(
        default=list,
        blank=True,
        help_text=_("Tags such as accessible, smoking, sea-view, garden-view."),
    )
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.AVAILABLE)
    maintenance_reason = models.CharField(max_length=255, blank=True)
    maintenance_start_date = models.DateField(null=True, blank=True)
    maintenance_end_date = models.DateField(
        null=True,
        blank=True,
        help_text=_("Last day of maintenance, inclusive."),
    )
    notes = models.TextField(blank=True)
    last_cleaned = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Room unit")
        verbose_name_plural = _("Room units")
        ordering = ["unit_number", "id"]
        constraints = [
            models.CheckConstraint(
                condition=(
                    models.Q(maintenance_start_date__isnull=True, maintenance_end_date__isnull=True)
                    | models.Q(
                        maintenance_start_date__isnull=False,
                        maintenance_end_date__gte=models.F("maintenance_start_date"),
                    )
                ),
                name="room_unit_maintenance_window_valid",
            ),
        ]
        indexes = [
            models.Index(fields=["room_type", "status"]),
        ]

    def __str__(self) -> str:
        return self.unit_name or self.unit_number

    def save(self, *args, **kwargs):  # type: ignore
        self.unit_name = f"{self.room_type.name} #{self.unit_number}"
        update_fields = kwargs.get("update_fields")
        if update_fields is not None and "unit_name" not in update_fields:
            kwargs["update_fields"] = [*update_fields, "unit_name"]
        super().save(*args, **kwargs)

    @property
    def maintenance_window(self) -> CalendarWindow | None:
        if self.maintenance_start_date is None or self.maintenance_end_date is None:
            return None
        return CalendarWindow(self.maintenance_start_date, self.maintenance_end_date)

    def has_feature(self, tag: str) -> bool:
        wanted = tag.strip().lower()
        return any(str(feature).strip().lower() == wanted for feature in self.special_features or [])

    def schedule_maintenance(self, start_date, end_date, reason: str = "") -> None:
        self.maintenance_start_date = start_date
        self.maintenance_end_date = end_date
        self.maintenance_reason = reason
        self.save(update_fields=["maintenance_start_date", "maintenance_end_date", "maintenance_reason", "updated_at"])

    def release(self) -> None:
        """Clear any maintenance window and put the unit back in service."""

        self.status = self.Status.AVAILABLE
        self.maintenance_start_date = None
        self.maintenance_end_date = None
        self.maintenance_reason = ""
        self.save(
            update_fields=[
                "status",
                "maintenance_start_date",
                "maintenance_end_date",
                "maintenance_reason",
                "updated_at",
            ]
        )
