"""URL routing for admin booking management."""

from __future__ import annotations

from django.urls import include, path  # type: ignore
from rest_framework.routers import SimpleRouter  # type: ignore

from .views import AdminBookingViewSet

router = SimpleRouter()
router.register(r"bookings", AdminBookingViewSet, basename="admin-booking")

urlpatterns = [
    path("", include(router.urls)),
]
