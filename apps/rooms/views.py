"""Room catalog API views: public browsing and availability, admin inventory."""

from __future__ import annotations

from django.db.models import Prefetch  # type: ignore
from drf_spectacular.utils import extend_schema  # type: ignore
from rest_framework import mixins, permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.filters import OrderingFilter  # type: ignore
from django_filters.rest_framework import DjangoFilterBackend  # type: ignore
from rest_framework.response import Response  # type: ignore

from apps.bookings import services as booking_services
from apps.users.api.permissions import IsGuesthouseAdmin

from . import services
from .filters import RoomUnitFilterSet
from .models import RoomType, RoomUnit, SeasonalPricing
from .serializers import (
    AdminRoomTypeSerializer,
    AvailabilityRequestSerializer,
    MaintenanceWindowSerializer,
    RoomTypeSerializer,
    RoomUnitSerializer,
    StayDatesSerializer,
)


def _room_type_queryset():
    return services.with_live_counts(
        RoomType.objects.prefetch_related(
            Prefetch("seasonal_pricing", queryset=SeasonalPricing.objects.order_by("position", "id")),
            "blackout_dates",
        )
    )


class RoomTypeViewSet(viewsets.ReadOnlyModelViewSet):
    """Public catalog of active room types with live unit counts."""

    serializer_class = RoomTypeSerializer
    permission_classes = [permissions.AllowAny]
    pagination_class = None
    lookup_value_regex = r"\d+"

    def get_queryset(self):  # type: ignore
        return _room_type_queryset().filter(is_active=True)

    @extend_schema(request=AvailabilityRequestSerializer)
    @action(detail=True, methods=["post"], url_path="check-availability")
    def check_availability(self, request, pk=None):  # type: ignore
        params = AvailabilityRequestSerializer(data=request.data)
        params.is_valid(raise_exception=True)
        data = params.validated_data

        room_type, result = booking_services.check_availability(
            pk,
            data["checkinDate"],
            data["checkoutDate"],
            data["numberOfGuests"],
        )
        payload = result.as_dict()
        payload["roomType"] = {
            "name": room_type.name,
            "price": f"{room_type.price:.2f}",
            "maxGuests": room_type.max_guests,
        }
        if result.available:
            quote = booking_services.quote_stay(room_type, data["checkinDate"], data["checkoutDate"])
            payload["quote"] = quote.as_dict()
        return Response(payload)

    @extend_schema(request=StayDatesSerializer, responses=RoomUnitSerializer(many=True))
    @action(detail=True, methods=["post"], url_path="available-units")
    def available_units(self, request, pk=None):  # type: ignore
        params = StayDatesSerializer(data=request.data)
        params.is_valid(raise_exception=True)
        units = booking_services.list_available_units(
            pk,
            params.validated_data["checkinDate"],
            params.validated_data["checkoutDate"],
        )
        queryset = services.with_occupancy(
            RoomUnit.objects.select_related("room_type").filter(pk__in=[unit.pk for unit in units])
        )
        return Response(RoomUnitSerializer(queryset, many=True).data)


class AdminRoomTypeViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.CreateModelMixin,
    mixins.UpdateModelMixin,
    viewsets.GenericViewSet,
):
    """Admin management of room types. Room types are deactivated, never deleted."""

    serializer_class = AdminRoomTypeSerializer
    permission_classes = [IsGuesthouseAdmin]
    pagination_class = None
    lookup_value_regex = r"\d+"

    def get_queryset(self):  # type: ignore
        return _room_type_queryset()

    @extend_schema(request=RoomUnitSerializer, responses=RoomUnitSerializer(many=True))
    @action(detail=True, methods=["get", "post"])
    def units(self, request, pk=None):  # type: ignore
        room_type: RoomType = self.get_object()  # type: ignore
        if request.method == "GET":
            queryset = services.with_occupancy(room_type.units.select_related("room_type"))
            return Response(RoomUnitSerializer(queryset, many=True).data)

        serializer = RoomUnitSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        fields = dict(serializer.validated_data)
        unit = services.add_unit(room_type, fields.pop("unit_number", None), **fields)
        return Response(RoomUnitSerializer(unit).data, status=status.HTTP_201_CREATED)


class AdminRoomUnitViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.UpdateModelMixin,
    viewsets.GenericViewSet,
):
    """Admin management of individual room units."""

    serializer_class = RoomUnitSerializer
    permission_classes = [IsGuesthouseAdmin]
    filter_backends = [DjangoFilterBackend, OrderingFilter]
    filterset_class = RoomUnitFilterSet
    ordering_fields = ["unit_number", "floor", "status", "updated_at"]
    pagination_class = None
    lookup_value_regex = r"\d+"

    def get_queryset(self):  # type: ignore
        return services.with_occupancy(
            RoomUnit.objects.select_related("room_type").order_by("room_type_id", "unit_number")
        )

    def perform_update(self, serializer):  # type: ignore
        unit = serializer.save()
        unit.room_type.refresh_unit_counts()

    @extend_schema(request=MaintenanceWindowSerializer, responses=RoomUnitSerializer)
    @action(detail=True, methods=["post"])
    def maintenance(self, request, pk=None):  # type: ignore
        unit: RoomUnit = self.get_object()  # type: ignore
        window = MaintenanceWindowSerializer(data=request.data)
        window.is_valid(raise_exception=True)
        unit.schedule_maintenance(
            window.validated_data["startDate"],
            window.validated_data["endDate"],
            window.validated_data["reason"],
        )
        return Response(self.get_serializer(self.get_object()).data)

    @extend_schema(request=None, responses=RoomUnitSerializer)
    @action(detail=True, methods=["post"])
    def release(self, request, pk=None):  # type: ignore
        unit: RoomUnit = self.get_object()  # type: ignore
        unit.release()
        unit.room_type.refresh_unit_counts()
        return Response(self.get_serializer(self.get_object()).data)
