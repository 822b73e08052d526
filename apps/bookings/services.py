"""Domain services for booking workflows.

Loads room types, units and bookings, applies the rules from
apps.bookings.domain and persists the outcome. Allocation for one room
type is serialized by locking the RoomType row for the duration of the
transaction that computes the free pool and inserts the booking.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, timedelta

import structlog
from django.conf import settings  # type: ignore
from django.db import transaction  # type: ignore
from django.db.models import Case, CharField, F, Q, Value, When  # type: ignore
from django.db.utils import NotSupportedError  # type: ignore
from django.utils import timezone  # type: ignore

from apps.notifications.tasks import (
    dispatch,
    notify_admin_new_booking,
    send_booking_cancellation,
    send_booking_confirmation,
)
from apps.rooms.models import RoomType, RoomUnit
from shared.domain.exceptions import (
    CapacityError,
    NoCapacity,
    NotFoundError,
    PersistenceError,
    UnitConflict,
)
from shared.domain.value_objects import DateRange

from .domain.availability import (
    AvailabilityResult,
    assess_pool,
    check_room_type_rules,
    is_unit_eligible,
    stay_dates,
    validate_guest_count,
)
from .domain.pricing import PriceQuote, compute_total
from .domain.selection import GuestPreferences, select_unit
from .models import Booking

logger = structlog.get_logger(__name__)

REFERENCE_ATTEMPTS = 5


@dataclass
class GuestDetails:
    name: str
    email: str
    phone: str
    address: str = ""
    id_number: str = ""


@dataclass
class BookingRequest:
    """Everything the allocation needs, already validated at the API boundary."""

    room_type_id: int
    checkin: date
    checkout: date
    guest_count: int
    guest: GuestDetails
    preferences: GuestPreferences = field(default_factory=GuestPreferences)
    room_unit_id: int | None = None
    special_requests: str = ""
    source: str = Booking.Source.WEBSITE


def _lock_queryset_if_possible(queryset):
    """Apply select_for_update when inside transaction.atomic()."""

    if not transaction.get_connection().in_atomic_block:
        return queryset

    try:
        return queryset.select_for_update()
    except NotSupportedError:
        return queryset


def lock_booking(booking_id) -> Booking:
    """Re-read a booking under a row lock; call inside transaction.atomic()."""

    return _lock_queryset_if_possible(Booking.objects.filter(pk=booking_id)).get()


def get_room_type(room_type_id, *, lock: bool = False) -> RoomType:
    queryset = RoomType.objects.filter(pk=room_type_id)
    if lock:
        queryset = _lock_queryset_if_possible(queryset)
    room_type = queryset.first()
    if room_type is None:
        raise NotFoundError("Room type not found.")
    return room_type


def overlapping_bookings(stay: DateRange):
    """Non-cancelled bookings whose [checkin, checkout) intersects the stay."""

    return Booking.objects.exclude(status=Booking.Status.CANCELLED).filter(
        Q(checkin_date__lt=stay.end_date) & Q(checkout_date__gt=stay.start_date)
    )


def occupied_unit_ids(room_type: RoomType, stay: DateRange, *, exclude_booking_id=None) -> set[int]:
    bookings = overlapping_bookings(stay).filter(room_type=room_type)
    if exclude_booking_id is not None:
        bookings = bookings.exclude(pk=exclude_booking_id)
    return set(bookings.values_list("room_unit_id", flat=True))


def unit_has_conflict(unit: RoomUnit, stay: DateRange, *, exclude_booking_id=None) -> bool:
    bookings = overlapping_bookings(stay).filter(room_unit=unit)
    if exclude_booking_id is not None:
        bookings = bookings.exclude(pk=exclude_booking_id)
    return bookings.exists()


def check_availability(room_type_id, checkin, checkout, guest_count: int = 1) -> tuple[RoomType, AvailabilityResult]:
    """Read-only availability check. Returns the room type with the result."""

    stay = stay_dates(checkin, checkout)
    validate_guest_count(guest_count)
    room_type = get_room_type(room_type_id)

    rejection = check_room_type_rules(room_type, stay, guest_count, room_type.blackout_dates.all())
    if rejection is not None:
        return room_type, AvailabilityResult.rejected(rejection)

    units = list(room_type.units.all())
    return room_type, assess_pool(units, stay, occupied_unit_ids(room_type, stay))


def quote_stay(room_type: RoomType, checkin, checkout) -> PriceQuote:
    stay = stay_dates(checkin, checkout)
    return compute_total(room_type, stay.start_date, stay.nights)


def list_available_units(room_type_id, checkin, checkout) -> list[RoomUnit]:
    """Units of the room type that are in service and free for the whole stay."""

    stay = stay_dates(checkin, checkout)
    room_type = get_room_type(room_type_id)
    units = list(room_type.units.all())
    return list(assess_pool(units, stay, occupied_unit_ids(room_type, stay)).units)


def _reserve_reference() -> str:
    for _attempt in range(REFERENCE_ATTEMPTS):
        reference = Booking.generate_reference()
        if not Booking.objects.filter(booking_reference=reference).exists():
            return reference
    raise PersistenceError("Could not generate a unique booking reference.")


def announce_new_booking(booking: Booking) -> None:
    transaction.on_commit(lambda: dispatch(notify_admin_new_booking, booking.pk))


def allocate_and_create_booking(request: BookingRequest, *, notify_admin: bool = True) -> Booking:
    """
    Allocate a unit and persist a pending booking

    With `room_unit_id` the requested unit is validated and used; without
    it the free pool is computed and a unit picked by guest preference.
    Raises CapacityError (or NoCapacity) when the room type cannot take
    the stay and UnitConflict when the requested unit is not free.

    The admin is told about the booking once it commits; callers that still
    have work to do before the booking counts pass `notify_admin=False` and
    call announce_new_booking() themselves.
    """
    stay = stay_dates(request.checkin, request.checkout)
    validate_guest_count(request.guest_count)

    with transaction.atomic():
        room_type = get_room_type(request.room_type_id, lock=True)

        rejection = check_room_type_rules(room_type, stay, request.guest_count, room_type.blackout_dates.all())
        if rejection is not None:
            logger.info(
                "allocation_rejected",
                room_type=room_type.pk,
                rule=rejection.rule,
                checkin=str(stay.start_date),
                checkout=str(stay.end_date),
            )
            raise CapacityError(rejection.reason, rule=rejection.rule)

        units = list(room_type.units.all())
        occupied = occupied_unit_ids(room_type, stay)

        if request.room_unit_id is not None:
            unit = next((candidate for candidate in units if candidate.pk == int(request.room_unit_id)), None)
            if unit is None:
                raise UnitConflict("The selected room does not belong to this room type.")
            if not is_unit_eligible(unit, stay) or unit.pk in occupied:
                raise UnitConflict()
        else:
            result = assess_pool(units, stay, occupied)
            if not result.available:
                logger.info(
                    "allocation_rejected",
                    room_type=room_type.pk,
                    rule=result.rule,
                    eligible_units=result.total_units,
                )
                raise NoCapacity(result.reason)
            unit = select_unit(result.units, request.preferences)

        # The room type lock already serializes writers; this guards direct inserts
        if unit_has_conflict(unit, stay):
            raise UnitConflict()

        quote = compute_total(room_type, stay.start_date, stay.nights)
        booking = Booking.objects.create(
            booking_reference=_reserve_reference(),
            room_type=room_type,
            room_unit=unit,
            room_type_name=room_type.name,
            room_unit_number=unit.unit_number,
            room_unit_name=unit.unit_name,
            guest_name=request.guest.name,
            guest_email=request.guest.email,
            guest_phone=request.guest.phone,
            guest_address=request.guest.address,
            guest_id_number=request.guest.id_number,
            checkin_date=stay.start_date,
            checkout_date=stay.end_date,
            number_of_guests=request.guest_count,
            nights=quote.nights,
            price_multiplier=quote.multiplier,
            seasonal_rule=quote.seasonal_rule,
            total_amount=quote.total.amount,
            currency=quote.total.currency,
            guest_preferences=request.preferences.as_dict(),
            special_requests=request.special_requests,
            source=request.source,
        )
        if notify_admin:
            announce_new_booking(booking)

    logger.info(
        "booking_created",
        reference=booking.booking_reference,
        room_type=room_type.pk,
        unit=unit.unit_number,
        checkin=str(stay.start_date),
        checkout=str(stay.end_date),
        total=str(booking.total_amount),
    )
    return booking


def discard_unpaid_booking(booking: Booking, *, reason: str) -> None:
    """Delete a booking that never reached checkout, freeing its unit."""

    with transaction.atomic():
        deleted, _ = Booking.objects.filter(
            pk=booking.pk,
            status=Booking.Status.PENDING,
            payment_status=Booking.PaymentStatus.PENDING,
        ).delete()
    if deleted:
        logger.warning("booking_discarded", reference=booking.booking_reference, reason=reason)


def get_booking_by_reference(reference: str) -> Booking:
    booking = Booking.objects.select_related("room_type", "room_unit").filter(booking_reference=reference).first()
    if booking is None:
        raise NotFoundError("Booking not found.")
    return booking


def get_guest_booking(reference: str, email: str) -> Booking:
    """Guest lookup: the e-mail must match the one on the booking."""

    booking = get_booking_by_reference(reference)
    if not email or booking.guest_email.strip().lower() != email.strip().lower():
        raise NotFoundError("Booking not found.")
    return booking


def confirm_payment(reference: str, *, payment_id: str = "") -> tuple[Booking, bool]:
    """
    Mark a booking paid and confirmed

    Compare-and-set on payment_status so duplicate verifications and
    webhooks cannot confirm twice. Returns the booking and whether this
    call performed the transition; only that caller sends the
    confirmation e-mail.
    """
    now = timezone.now()
    updated = (
        Booking.objects.filter(
            booking_reference=reference,
            payment_status__in=[Booking.PaymentStatus.PENDING, Booking.PaymentStatus.FAILED],
        )
        .exclude(status=Booking.Status.CANCELLED)
        .update(
            payment_status=Booking.PaymentStatus.PAID,
            status=Case(
                When(status=Booking.Status.PENDING, then=Value(Booking.Status.CONFIRMED)),
                default=F("status"),
                output_field=CharField(),
            ),
            paid_at=now,
            payment_id=payment_id or reference,
            updated_at=now,
        )
    )
    if not updated:
        _record_late_capture(reference, payment_id=payment_id, now=now)
        return get_booking_by_reference(reference), False
    booking = get_booking_by_reference(reference)

    logger.info("payment_confirmed", reference=reference, amount=str(booking.total_amount))
    transaction.on_commit(lambda: dispatch(send_booking_confirmation, booking.pk))
    return booking, True


def _record_late_capture(reference: str, *, payment_id: str, now) -> None:
    """
    Keep a record of money captured for a booking that is already cancelled

    The booking stays cancelled and its unit stays free, but the payment is
    stored as paid so that staff can see it and refund it.
    """
    captured = Booking.objects.filter(
        booking_reference=reference,
        status=Booking.Status.CANCELLED,
        payment_status__in=[Booking.PaymentStatus.PENDING, Booking.PaymentStatus.FAILED],
    ).update(
        payment_status=Booking.PaymentStatus.PAID,
        paid_at=now,
        payment_id=payment_id or reference,
        updated_at=now,
    )
    if captured:
        logger.warning("payment_for_cancelled_booking", reference=reference, payment_id=payment_id or reference)


def mark_payment_failed(reference: str) -> bool:
    updated = Booking.objects.filter(
        booking_reference=reference,
        payment_status=Booking.PaymentStatus.PENDING,
    ).update(payment_status=Booking.PaymentStatus.FAILED, updated_at=timezone.now())
    if updated:
        logger.info("payment_failed", reference=reference)
    return bool(updated)


def cancel_booking(booking: Booking, reason: str = "", *, actor: str = "admin") -> Booking:
    """Cancel a pending or confirmed booking; its dates become free immediately."""

    with transaction.atomic():
        locked = lock_booking(booking.pk)
        locked.mark_cancelled(reason)
        transaction.on_commit(lambda: dispatch(send_booking_cancellation, locked.pk))

    logger.info("booking_cancelled", reference=locked.booking_reference, actor=actor, reason=reason)
    return locked


def cancel_guest_booking(reference: str, email: str, reason: str = "") -> Booking:
    booking = get_guest_booking(reference, email)
    return cancel_booking(booking, reason or "Cancelled by guest", actor="guest")


def set_booking_status(booking: Booking, target: str, *, reason: str = "") -> Booking:
    """Admin status change: cancellation follows the lifecycle, other targets are overrides."""

    if target == Booking.Status.CANCELLED:
        return cancel_booking(booking, reason or "Cancelled by admin")
    booking.force_status(target)
    logger.info("booking_status_overridden", reference=booking.booking_reference, status=target)
    return booking


def expire_unpaid_bookings(now=None) -> int:
    """
    Cancel website bookings that stayed unpaid past the hold window

    Only bookings made through the public checkout are held for payment;
    bookings entered by staff (admin, phone, walk-in) never expire.
    """

    hold_minutes = settings.BOOKING_PAYMENT_HOLD_MINUTES
    if hold_minutes <= 0:
        return 0
    cutoff = (now or timezone.now()) - timedelta(minutes=hold_minutes)
    stale = Booking.objects.filter(
        status=Booking.Status.PENDING,
        source=Booking.Source.WEBSITE,
        payment_status__in=[Booking.PaymentStatus.PENDING, Booking.PaymentStatus.FAILED],
        created_at__lte=cutoff,
    )
    expired = 0
    for booking in stale:
        with transaction.atomic():
            locked = lock_booking(booking.pk)
            # Paid while we were iterating
            if locked.status != Booking.Status.PENDING or locked.payment_status == Booking.PaymentStatus.PAID:
                continue
            locked.mark_cancelled(f"Payment not received within {hold_minutes} minutes")
            transaction.on_commit(lambda pk=locked.pk: dispatch(send_booking_cancellation, pk))
        expired += 1
        logger.info("booking_expired", reference=locked.booking_reference)
    return expired
