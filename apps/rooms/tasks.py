"""Celery tasks for the room catalog."""

from __future__ import annotations

import logging

from celery import shared_task  # type: ignore

from .services import refresh_all_unit_counts

logger = logging.getLogger(__name__)


@shared_task(name="rooms.refresh_available_units")
def refresh_available_units() -> dict[str, int]:
    """
    Recompute the cached unit counters on every room type.

    The counters are for display in listings and the admin; allocation
    never reads them. Runs hourly through Celery Beat.
    """
    refreshed = refresh_all_unit_counts()
    logger.info(f"Refreshed unit counts for {refreshed} room types")
    return {"refreshed": refreshed}
