"""Serializers for the room catalog."""

from __future__ import annotations

from decimal import Decimal

from rest_framework import serializers  # type: ignore
from rest_framework.validators import UniqueValidator  # type: ignore

from shared.domain.value_objects import SUPPORTED_CURRENCIES

from . import services
from .models import BlackoutPeriod, RoomType, RoomUnit, SeasonalPricing


class SeasonalPricingSerializer(serializers.ModelSerializer):
    startDate = serializers.DateField(source="start_date")
    endDate = serializers.DateField(source="end_date")
    priceMultiplier = serializers.DecimalField(
        source="price_multiplier",
        max_digits=6,
        decimal_places=3,
        min_value=Decimal("0.001"),
        required=False,
    )
    isActive = serializers.BooleanField(source="is_active", required=False, default=True)

    class Meta:
        model = SeasonalPricing
        fields = ["id", "name", "startDate", "endDate", "priceMultiplier", "isActive"]
        read_only_fields = ["id"]

    def validate(self, attrs):  # type: ignore
        if "start_date" in attrs and "end_date" in attrs and attrs["end_date"] < attrs["start_date"]:
            raise serializers.ValidationError({"endDate": "Season end must not be before its start."})
        return attrs


class BlackoutPeriodSerializer(serializers.ModelSerializer):
    startDate = serializers.DateField(source="start_date")
    endDate = serializers.DateField(source="end_date")

    class Meta:
        model = BlackoutPeriod
        fields = ["id", "startDate", "endDate", "reason"]
        read_only_fields = ["id"]
        extra_kwargs = {"reason": {"required": False, "allow_blank": True}}

    def validate(self, attrs):  # type: ignore
        if "start_date" in attrs and "end_date" in attrs and attrs["end_date"] < attrs["start_date"]:
            raise serializers.ValidationError({"endDate": "Blackout end must not be before its start."})
        return attrs


class RoomUnitSerializer(serializers.ModelSerializer):
    roomTypeId = serializers.ReadOnlyField(source="room_type_id")
    roomTypeName = serializers.ReadOnlyField(source="room_type.name")
    unitNumber = serializers.CharField(
        source="unit_number",
        max_length=20,
        required=False,
        validators=[UniqueValidator(queryset=RoomUnit.objects.all())],
    )
    unitName = serializers.ReadOnlyField(source="unit_name")
    specialFeatures = serializers.ListField(
        source="special_features",
        child=serializers.CharField(max_length=50),
        required=False,
    )
    maintenanceReason = serializers.CharField(
        source="maintenance_reason",
        required=False,
        allow_blank=True,
        max_length=255,
    )
    maintenanceStartDate = serializers.DateField(source="maintenance_start_date", required=False, allow_null=True)
    maintenanceEndDate = serializers.DateField(source="maintenance_end_date", required=False, allow_null=True)
    lastCleaned = serializers.DateTimeField(source="last_cleaned", required=False, allow_null=True)
    isOccupiedToday = serializers.SerializerMethodField()
    createdAt = serializers.ReadOnlyField(source="created_at")
    updatedAt = serializers.ReadOnlyField(source="updated_at")

    class Meta:
        model = RoomUnit
        fields = [
            "id",
            "roomTypeId",
            "roomTypeName",
            "unitNumber",
            "unitName",
            "floor",
            "specialFeatures",
            "status",
            "maintenanceReason",
            "maintenanceStartDate",
            "maintenanceEndDate",
            "notes",
            "lastCleaned",
            "isOccupiedToday",
            "createdAt",
            "updatedAt",
        ]
        extra_kwargs = {
            "floor": {"required": False, "allow_blank": True},
            "notes": {"required": False, "allow_blank": True},
        }

    def get_isOccupiedToday(self, obj: RoomUnit) -> bool:
        occupied = getattr(obj, "occupied_today", None)
        if occupied is None:
            occupied = services.with_occupancy(RoomUnit.objects.filter(pk=obj.pk)).values_list(
                "occupied_today", flat=True
            ).first()
        return bool(occupied)

    def validate_unitNumber(self, value: str) -> str:
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Unit number cannot be blank.")
        return value

    def validate(self, attrs):  # type: ignore
        instance = self.instance
        start = attrs.get("maintenance_start_date", getattr(instance, "maintenance_start_date", None))
        end = attrs.get("maintenance_end_date", getattr(instance, "maintenance_end_date", None))
        if (start is None) != (end is None):
            raise serializers.ValidationError(
                {"maintenanceEndDate": "A maintenance window needs both a start and an end date."}
            )
        if start and end and end < start:
            raise serializers.ValidationError({"maintenanceEndDate": "Maintenance end must not be before its start."})
        return attrs


class MaintenanceWindowSerializer(serializers.Serializer):
    startDate = serializers.DateField()
    endDate = serializers.DateField()
    reason = serializers.CharField(required=False, allow_blank=True, max_length=255, default="")

    def validate(self, attrs):  # type: ignore
        if attrs["endDate"] < attrs["startDate"]:
            raise serializers.ValidationError({"endDate": "Maintenance end must not be before its start."})
        return attrs


class RoomTypeSerializer(serializers.ModelSerializer):
    """Read serializer used by the public catalog."""

    maxGuests = serializers.ReadOnlyField(source="max_guests")
    bedType = serializers.ReadOnlyField(source="bed_type")
    cancellationPolicy = serializers.ReadOnlyField(source="cancellation_policy")
    isActive = serializers.ReadOnlyField(source="is_active")
    minStay = serializers.ReadOnlyField(source="min_stay")
    maxStay = serializers.ReadOnlyField(source="max_stay")
    totalUnits = serializers.SerializerMethodField()
    availableUnits = serializers.SerializerMethodField()
    seasonalPricing = SeasonalPricingSerializer(source="seasonal_pricing", many=True, read_only=True)
    blackoutDates = BlackoutPeriodSerializer(source="blackout_dates", many=True, read_only=True)

    class Meta:
        model = RoomType
        fields = [
            "id",
            "name",
            "slug",
            "description",
            "price",
            "currency",
            "maxGuests",
            "amenities",
            "images",
            "features",
            "size",
            "bedType",
            "view",
            "cancellationPolicy",
            "isActive",
            "minStay",
            "maxStay",
            "totalUnits",
            "availableUnits",
            "seasonalPricing",
            "blackoutDates",
        ]
        read_only_fields = fields

    def get_totalUnits(self, obj: RoomType) -> int:
        live = getattr(obj, "live_total_units", None)
        return obj.units.count() if live is None else live

    def get_availableUnits(self, obj: RoomType) -> int:
        live = getattr(obj, "live_available_units", None)
        if live is None:
            return obj.units.filter(status=RoomUnit.Status.AVAILABLE).count()
        return live


class AdminRoomTypeSerializer(RoomTypeSerializer):
    """
    Admin create/update serializer

    `totalUnits` on create sets how many units are generated. Nested
    `seasonalPricing` and `blackoutDates` replace the stored lists when
    present in the payload and are left alone when omitted.
    """

    maxGuests = serializers.IntegerField(source="max_guests", min_value=1, required=False)
    bedType = serializers.CharField(source="bed_type", required=False, allow_blank=True, max_length=50)
    cancellationPolicy = serializers.CharField(source="cancellation_policy", required=False, max_length=255)
    isActive = serializers.BooleanField(source="is_active", required=False)
    minStay = serializers.IntegerField(source="min_stay", min_value=1, required=False)
    maxStay = serializers.IntegerField(source="max_stay", min_value=1, required=False)
    totalUnits = serializers.IntegerField(min_value=0, max_value=500, required=False, write_only=True)
    seasonalPricing = SeasonalPricingSerializer(source="seasonal_pricing", many=True, required=False)
    blackoutDates = BlackoutPeriodSerializer(source="blackout_dates", many=True, required=False)
    amenities = serializers.ListField(child=serializers.CharField(max_length=100), required=False)
    images = serializers.ListField(child=serializers.CharField(max_length=500), required=False)
    features = serializers.ListField(child=serializers.CharField(max_length=100), required=False)

    class Meta(RoomTypeSerializer.Meta):
        read_only_fields = ["id", "slug", "availableUnits"]
        extra_kwargs = {
            "description": {"required": False, "allow_blank": True},
            "size": {"required": False, "allow_blank": True},
            "view": {"required": False, "allow_blank": True},
        }

    def to_representation(self, instance):  # type: ignore
        data = super().to_representation(instance)
        data["totalUnits"] = self.get_totalUnits(instance)
        return data

    def validate_currency(self, value: str) -> str:
        value = value.upper()
        if value not in SUPPORTED_CURRENCIES:
            raise serializers.ValidationError(f"Unsupported currency: {value}")
        return value

    def validate(self, attrs):  # type: ignore
        instance = self.instance
        min_stay = attrs.get("min_stay", getattr(instance, "min_stay", 1))
        max_stay = attrs.get("max_stay", getattr(instance, "max_stay", 30))
        if max_stay < min_stay:
            raise serializers.ValidationError({"maxStay": "Maximum stay must not be below the minimum stay."})
        # PATCH skips required fields, but a replaced list must be complete
        for key, field_name, required in (
            ("seasonal_pricing", "seasonalPricing", ("name", "start_date", "end_date")),
            ("blackout_dates", "blackoutDates", ("start_date", "end_date")),
        ):
            for entry in attrs.get(key) or []:
                missing = [name for name in required if name not in entry]
                if missing:
                    raise serializers.ValidationError({field_name: f"Each entry needs {', '.join(missing)}."})
        return attrs

    def create(self, validated_data):  # type: ignore
        unit_count = validated_data.pop("totalUnits", 1)
        seasonal = validated_data.pop("seasonal_pricing", None)
        blackouts = validated_data.pop("blackout_dates", None)
        return services.create_room_type(
            validated_data,
            unit_count=unit_count,
            seasonal_pricing=seasonal,
            blackout_dates=blackouts,
        )

    def update(self, instance, validated_data):  # type: ignore
        # Units are managed through the units endpoint
        validated_data.pop("totalUnits", None)
        seasonal = validated_data.pop("seasonal_pricing", None)
        blackouts = validated_data.pop("blackout_dates", None)
        instance = super().update(instance, validated_data)
        if seasonal is not None:
            services.replace_seasonal_pricing(instance, seasonal)
        if blackouts is not None:
            services.replace_blackout_dates(instance, blackouts)
        return instance


class StayDatesSerializer(serializers.Serializer):
    checkinDate = serializers.DateField()
    checkoutDate = serializers.DateField()


class AvailabilityRequestSerializer(StayDatesSerializer):
    numberOfGuests = serializers.IntegerField(min_value=1, required=False, default=1)
