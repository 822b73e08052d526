"""API views for the booking domain."""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend  # type: ignore
from drf_spectacular.utils import OpenApiParameter, extend_schema  # type: ignore
from rest_framework import mixins, permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.filters import OrderingFilter  # type: ignore
from rest_framework.response import Response  # type: ignore

from apps.payments import services as payment_services
from apps.users.api.permissions import IsGuesthouseAdmin

from . import services
from .filters import BookingFilterSet
from .models import Booking
from .serializers import (
    AdminBookingCreateSerializer,
    AdminBookingSerializer,
    AdminBookingUpdateSerializer,
    BookingCreateSerializer,
    BookingSerializer,
    GuestCancelSerializer,
    ReasonSerializer,
)


class BookingViewSet(viewsets.GenericViewSet):
    """
    Guest-facing bookings

    Guests have no accounts: a booking is looked up by its reference and
    the e-mail address it was made with.
    """

    serializer_class = BookingSerializer
    permission_classes = [permissions.AllowAny]
    lookup_field = "booking_reference"
    lookup_url_kwarg = "reference"
    lookup_value_regex = r"[A-Za-z0-9-]+"

    def get_queryset(self):  # type: ignore
        return Booking.objects.select_related("room_type", "room_unit")

    @extend_schema(request=BookingCreateSerializer)
    @action(detail=False, methods=["post"], url_path="with-payment")
    def with_payment(self, request):  # type: ignore
        serializer = BookingCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        booking, session = payment_services.create_booking_with_payment(serializer.to_booking_request())
        return Response(
            {"booking": BookingSerializer(booking).data, "payment": session.as_dict()},
            status=status.HTTP_201_CREATED,
        )

    @extend_schema(parameters=[OpenApiParameter("email", str, required=True)])
    def retrieve(self, request, reference=None):  # type: ignore
        booking = services.get_guest_booking(reference, request.query_params.get("email", ""))
        return Response(BookingSerializer(booking).data)

    @extend_schema(request=GuestCancelSerializer)
    @action(detail=True, methods=["post"])
    def cancel(self, request, reference=None):  # type: ignore
        payload = GuestCancelSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        booking = services.cancel_guest_booking(
            reference,
            payload.validated_data["guestEmail"],
            payload.validated_data["reason"],
        )
        return Response(BookingSerializer(booking).data)


class AdminBookingViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    """Booking management for guesthouse staff."""

    serializer_class = AdminBookingSerializer
    permission_classes = [IsGuesthouseAdmin]
    filter_backends = [DjangoFilterBackend, OrderingFilter]
    filterset_class = BookingFilterSet
    ordering_fields = ["created_at", "checkin_date", "total_amount", "status"]
    ordering = ["-created_at"]
    lookup_value_regex = r"\d+"
    http_method_names = ["get", "post", "patch", "head", "options"]

    def get_queryset(self):  # type: ignore
        return Booking.objects.select_related("room_type", "room_unit")

    @extend_schema(request=AdminBookingCreateSerializer, responses=AdminBookingSerializer)
    def create(self, request):  # type: ignore
        serializer = AdminBookingCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        booking = services.allocate_and_create_booking(
            serializer.to_booking_request(source=serializer.validated_data["source"])
        )
        notes = serializer.validated_data.get("notes")
        if notes:
            booking.notes = notes
            booking.save(update_fields=["notes", "updated_at"])
        return Response(AdminBookingSerializer(booking).data, status=status.HTTP_201_CREATED)

    @extend_schema(request=AdminBookingUpdateSerializer, responses=AdminBookingSerializer)
    def partial_update(self, request, pk=None):  # type: ignore
        booking: Booking = self.get_object()  # type: ignore
        payload = AdminBookingUpdateSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        data = payload.validated_data

        fields = []
        if "notes" in data:
            booking.notes = data["notes"]
            fields.append("notes")
        if "specialRequests" in data:
            booking.special_requests = data["specialRequests"]
            fields.append("special_requests")
        if fields:
            booking.save(update_fields=fields + ["updated_at"])

        target = data.get("status")
        if target and target != booking.status:
            booking = services.set_booking_status(booking, target, reason=data.get("cancellationReason", ""))
        return Response(AdminBookingSerializer(booking).data)

    @extend_schema(request=ReasonSerializer, responses=AdminBookingSerializer)
    @action(detail=True, methods=["post"])
    def cancel(self, request, pk=None):  # type: ignore
        booking: Booking = self.get_object()  # type: ignore
        payload = ReasonSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        booking = services.cancel_booking(booking, payload.validated_data["reason"] or "Cancelled by admin")
        return Response(AdminBookingSerializer(booking).data)

    @extend_schema(request=None, responses=AdminBookingSerializer)
    @action(detail=True, methods=["post"], url_path="check-in")
    def check_in(self, request, pk=None):  # type: ignore
        booking = services.set_booking_status(self.get_object(), Booking.Status.CHECKED_IN)
        return Response(AdminBookingSerializer(booking).data)

    @extend_schema(request=None, responses=AdminBookingSerializer)
    @action(detail=True, methods=["post"], url_path="check-out")
    def check_out(self, request, pk=None):  # type: ignore
        booking = services.set_booking_status(self.get_object(), Booking.Status.CHECKED_OUT)
        return Response(AdminBookingSerializer(booking).data)

    @extend_schema(request=ReasonSerializer, responses=AdminBookingSerializer)
    @action(detail=True, methods=["post"])
    def refund(self, request, pk=None):  # type: ignore
        booking: Booking = self.get_object()  # type: ignore
        payload = ReasonSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        booking = payment_services.refund_booking(booking, payload.validated_data["reason"])
        return Response(AdminBookingSerializer(booking).data)
