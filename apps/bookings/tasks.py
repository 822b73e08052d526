"""Celery tasks for the booking domain."""

from __future__ import annotations

import logging

from celery import shared_task  # type: ignore

from .services import expire_unpaid_bookings as expire_unpaid

logger = logging.getLogger(__name__)


# ============================================================================
# PERIODIC TASKS (run by Celery Beat)
# ============================================================================

@shared_task(name="bookings.expire_unpaid_bookings")
def expire_unpaid_bookings() -> dict[str, int]:
    """
    Cancel website bookings whose payment never arrived.

    A pending booking blocks its unit until it is paid or cancelled; after
    BOOKING_PAYMENT_HOLD_MINUTES without payment the unit is released.

    Runs every 5 minutes through Celery Beat.

    Returns:
        dict: {"expired": number of cancelled bookings}
    """
    expired = expire_unpaid()
    if expired:
        logger.info(f"Expired {expired} unpaid bookings")
    return {"expired": expired}
