"""Payment workflows: checkout at booking time, verification, webhooks and refunds."""

from __future__ import annotations

from dataclasses import dataclass

import structlog
from django.db import transaction  # type: ignore

from apps.bookings.models import Booking
from apps.bookings.services import (
    BookingRequest,
    allocate_and_create_booking,
    announce_new_booking,
    confirm_payment,
    discard_unpaid_booking,
    get_booking_by_reference,
    lock_booking,
    mark_payment_failed,
)
from shared.domain.exceptions import InvalidTransition, NotFoundError, PaymentGatewayError
from shared.domain.value_objects import Money

from .gateway import CheckoutSession, PaymentVerification, PaystackGateway

logger = structlog.get_logger(__name__)

CHARGE_SUCCESS = "charge.success"


@dataclass(frozen=True)
class VerificationOutcome:
    reference: str
    status: str
    paid: bool
    amount: Money
    booking_confirmed: bool

    def as_dict(self) -> dict:
        return {
            "status": self.status,
            "paid": self.paid,
            "amount": f"{self.amount.amount:.2f}",
            "currency": self.amount.currency,
            "reference": self.reference,
            "bookingConfirmed": self.booking_confirmed,
        }


def booking_amount(booking: Booking) -> Money:
    return Money(booking.total_amount, booking.currency).rounded()


def create_booking_with_payment(
    request: BookingRequest,
    gateway: PaystackGateway | None = None,
) -> tuple[Booking, CheckoutSession]:
    """
    Allocate a booking, then open a checkout for it

    The room type lock is released when the allocation commits, so the
    gateway round trip does not hold up other guests booking the same room
    type. If the gateway call fails the booking is discarded before the
    admin hears about it, so a guest is never left holding a room they have
    no way to pay for.
    """
    gateway = gateway or PaystackGateway.from_settings()
    booking = allocate_and_create_booking(request, notify_admin=False)
    try:
        session = gateway.initialize(
            email=booking.guest_email,
            amount=booking_amount(booking),
            reference=booking.booking_reference,
            metadata={
                "bookingReference": booking.booking_reference,
                "roomType": booking.room_type_name,
                "roomUnit": booking.room_unit_number,
                "guestName": booking.guest_name,
            },
        )
    except PaymentGatewayError:
        discard_unpaid_booking(booking, reason=PaymentGatewayError.code)
        raise
    announce_new_booking(booking)
    return booking, session


def _amount_matches(booking: Booking, verification: PaymentVerification) -> bool:
    if verification.amount is None:
        return True
    return verification.amount.minor_units == booking_amount(booking).minor_units


def verify_payment(reference: str, gateway: PaystackGateway | None = None) -> VerificationOutcome:
    """
    Verify a payment by booking reference and confirm the booking if paid

    Safe to call any number of times: an already paid booking is reported
    as such without contacting the gateway or sending another e-mail.
    """
    booking = get_booking_by_reference(reference)
    if booking.payment_status in (Booking.PaymentStatus.PAID, Booking.PaymentStatus.REFUNDED):
        return VerificationOutcome(
            reference=reference,
            status="success",
            paid=True,
            amount=booking_amount(booking),
            booking_confirmed=booking.status != Booking.Status.CANCELLED,
        )

    gateway = gateway or PaystackGateway.from_settings()
    verification = gateway.verify(reference)

    if verification.paid:
        if not _amount_matches(booking, verification):
            logger.warning(
                "payment_amount_mismatch",
                reference=reference,
                expected=booking_amount(booking).minor_units,
                received=verification.amount.minor_units if verification.amount else None,
            )
            return VerificationOutcome(
                reference=reference,
                status="amount_mismatch",
                paid=False,
                amount=booking_amount(booking),
                booking_confirmed=False,
            )
        booking, _confirmed_now = confirm_payment(reference, payment_id=verification.transaction_id)
    elif verification.failed:
        mark_payment_failed(reference)
        booking.refresh_from_db()

    return VerificationOutcome(
        reference=reference,
        status=verification.status,
        paid=verification.paid,
        amount=booking_amount(booking),
        booking_confirmed=booking.status in (
            Booking.Status.CONFIRMED,
            Booking.Status.CHECKED_IN,
            Booking.Status.CHECKED_OUT,
        ) and booking.payment_status == Booking.PaymentStatus.PAID,
    )


def handle_webhook_event(event: dict, gateway: PaystackGateway | None = None) -> VerificationOutcome | None:
    """Process a verified Paystack event. Only charge.success changes state."""

    name = event.get("event")
    reference = (event.get("data") or {}).get("reference")
    if name != CHARGE_SUCCESS or not reference:
        logger.info("paystack_webhook_ignored", paystack_event=name, reference=reference)
        return None

    try:
        return verify_payment(reference, gateway)
    except NotFoundError:
        logger.warning("paystack_webhook_unknown_reference", reference=reference)
        return None


def refund_booking(booking: Booking, reason: str = "", gateway: PaystackGateway | None = None) -> Booking:
    """
    Refund a paid booking in full through the gateway

    The booking row stays locked from the paid check until it is marked
    refunded, so concurrent requests cannot refund the same payment twice.
    """
    gateway = gateway or PaystackGateway.from_settings()
    with transaction.atomic():
        locked = lock_booking(booking.pk)
        if locked.payment_status != Booking.PaymentStatus.PAID:
            raise InvalidTransition(f"Booking {locked.booking_reference} has no captured payment to refund.")
        gateway.refund(locked.payment_id or locked.booking_reference, reason=reason)
        locked.mark_refunded()

    logger.info("booking_refunded", reference=locked.booking_reference, amount=str(locked.total_amount))
    return locked
