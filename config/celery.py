import os

from celery import Celery
from celery.schedules import crontab  # type: ignore

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings.dev")

app = Celery("guesthouse")

app.config_from_object("django.conf:settings", namespace="CELERY")
app.autodiscover_tasks()


# ============================================================================
# CELERY BEAT SCHEDULE (Periodic Tasks)
# ============================================================================

app.conf.beat_schedule = {
    # Release units held by unpaid bookings - every 5 minutes
    "expire-unpaid-bookings": {
        "task": "bookings.expire_unpaid_bookings",
        "schedule": 300.0,
        "options": {"expires": 240},
    },
    # Recompute the display counters on room types - hourly
    "refresh-available-units": {
        "task": "rooms.refresh_available_units",
        "schedule": crontab(minute=0),
    },
}

app.conf.timezone = "Africa/Johannesburg"
