"""Celery tasks for guest and admin notifications."""

from __future__ import annotations

import logging

from celery import shared_task  # type: ignore
from kombu.exceptions import OperationalError  # type: ignore

from . import services

logger = logging.getLogger(__name__)


def dispatch(task, *args) -> None:
    """Queue a notification task; a broker outage is logged and never fails the caller."""

    try:
        task.delay(*args)
    except OperationalError:
        logger.exception(f"Could not queue {task.name} for {args}")


def _load_booking(booking_id: int):
    from apps.bookings.models import Booking  # Local import to prevent circular dependency

    booking = Booking.objects.filter(pk=booking_id).first()
    if booking is None:
        logger.warning(f"Booking {booking_id} not found, notification skipped")
    return booking


@shared_task(name="notifications.send_booking_confirmation")
def send_booking_confirmation(booking_id: int) -> bool:
    booking = _load_booking(booking_id)
    if booking is None:
        return False
    return services.send_booking_confirmation_email(booking)


@shared_task(name="notifications.send_booking_cancellation")
def send_booking_cancellation(booking_id: int) -> bool:
    booking = _load_booking(booking_id)
    if booking is None:
        return False
    return services.send_booking_cancellation_email(booking)


@shared_task(name="notifications.notify_admin_new_booking")
def notify_admin_new_booking(booking_id: int) -> bool:
    booking = _load_booking(booking_id)
    if booking is None:
        return False
    return services.send_new_booking_to_admin_email(booking)
