"""Notification services for guest and admin e-mails."""

from __future__ import annotations

import logging
from smtplib import SMTPException
from typing import TYPE_CHECKING

from django.conf import settings  # type: ignore
from django.core.mail import send_mail  # type: ignore
from django.utils.html import escape, strip_tags  # type: ignore

from shared.domain.value_objects import Money

if TYPE_CHECKING:  # pragma: no cover
    from apps.bookings.models import Booking

logger = logging.getLogger(__name__)

DATE_FORMAT = "%A, %d %B %Y"


# ============================================================================
# EMAIL NOTIFICATIONS
# ============================================================================

def send_email_notification(recipient_email: str, subject: str, html_message: str) -> bool:
    """
    Send one HTML e-mail with a plain-text alternative.

    Returns:
        bool: True if the message was handed to the mail backend
    """
    try:
        send_mail(
            subject=subject,
            message=strip_tags(html_message),
            from_email=settings.DEFAULT_FROM_EMAIL,
            recipient_list=[recipient_email],
            html_message=html_message,
            fail_silently=False,
        )
    except (SMTPException, OSError) as e:
        logger.error(f"Failed to send email to {recipient_email}: {e}", exc_info=True)
        return False

    logger.info(f"Email sent successfully to {recipient_email}: {subject}")
    return True


def _amount(booking: "Booking") -> str:
    return str(Money(booking.total_amount, booking.currency))


def _stay_rows(booking: "Booking") -> str:
    return f"""
            <li><strong>Booking reference:</strong> {booking.booking_reference}</li>
            <li><strong>Room:</strong> {escape(booking.room_type_name)} ({escape(booking.room_unit_name)})</li>
            <li><strong>Check-in:</strong> {booking.checkin_date.strftime(DATE_FORMAT)}</li>
            <li><strong>Check-out:</strong> {booking.checkout_date.strftime(DATE_FORMAT)}</li>
            <li><strong>Nights:</strong> {booking.nights}</li>
            <li><strong>Guests:</strong> {booking.number_of_guests}</li>
            <li><strong>Total:</strong> {_amount(booking)}</li>"""


def send_booking_confirmation_email(booking: "Booking") -> bool:
    """Payment received: the stay is confirmed."""
    name = settings.GUESTHOUSE_NAME
    subject = f"Booking Confirmation - {name} (Ref: {booking.booking_reference})"

    special_requests = ""
    if booking.special_requests:
        special_requests = f"<h3>Special requests</h3><p>{escape(booking.special_requests)}</p>"

    html_message = f"""
    <html>
    <body>
        <h2>Dear {escape(booking.guest_name)},</h2>
        <p>Thank you for choosing {name}. Your payment has been received and your booking is confirmed.</p>

        <h3>Booking details</h3>
        <ul>{_stay_rows(booking)}
        </ul>
        {special_requests}

        <h3>Important information</h3>
        <ul>
            <li>Check-in from 14:00, check-out by 11:00</li>
            <li>Please bring a valid ID for check-in</li>
        </ul>

        <p>We look forward to welcoming you.<br>{name}</p>
    </body>
    </html>
    """

    return send_email_notification(booking.guest_email, subject, html_message)


def send_booking_cancellation_email(booking: "Booking") -> bool:
    """The booking was cancelled by the guest, an admin or payment expiry."""
    name = settings.GUESTHOUSE_NAME
    subject = f"Booking Cancelled - {name} (Ref: {booking.booking_reference})"

    reason = ""
    if booking.cancellation_reason:
        reason = f"<p><strong>Reason:</strong> {escape(booking.cancellation_reason)}</p>"

    refund_note = ""
    if booking.payment_status == booking.PaymentStatus.PAID:
        refund_note = "<p>Your payment will be refunded according to our cancellation policy.</p>"

    html_message = f"""
    <html>
    <body>
        <h2>Dear {escape(booking.guest_name)},</h2>
        <p>Your booking <strong>{booking.booking_reference}</strong> has been cancelled.</p>
        {reason}

        <h3>Cancelled booking</h3>
        <ul>{_stay_rows(booking)}
        </ul>
        {refund_note}

        <p>You are welcome to make a new booking at any time.<br>{name}</p>
    </body>
    </html>
    """

    return send_email_notification(booking.guest_email, subject, html_message)


def send_new_booking_to_admin_email(booking: "Booking") -> bool:
    """Tell the front desk a new booking is waiting for payment."""
    recipient = settings.GUESTHOUSE_ADMIN_EMAIL
    if not recipient:
        logger.debug("GUESTHOUSE_ADMIN_EMAIL not set, skipping admin notification")
        return False

    subject = f"New booking {booking.booking_reference}"

    html_message = f"""
    <html>
    <body>
        <h2>New booking received</h2>
        <ul>{_stay_rows(booking)}
            <li><strong>Guest:</strong> {escape(booking.guest_name)}</li>
            <li><strong>E-mail:</strong> {escape(booking.guest_email)}</li>
            <li><strong>Phone:</strong> {escape(booking.guest_phone)}</li>
            <li><strong>Source:</strong> {booking.get_source_display()}</li>
        </ul>
        <p>Payment status: {booking.get_payment_status_display()}</p>
    </body>
    </html>
    """

    return send_email_notification(recipient, subject, html_message)
