"""URL routing for admin room inventory management."""

from __future__ import annotations

from django.urls import include, path  # type: ignore
from rest_framework.routers import SimpleRouter  # type: ignore

from .views import AdminRoomTypeViewSet, AdminRoomUnitViewSet

router = SimpleRouter()
router.register(r"room-types", AdminRoomTypeViewSet, basename="admin-room-type")
router.register(r"room-units", AdminRoomUnitViewSet, basename="admin-room-unit")

urlpatterns = [
    path("", include(router.urls)),
]
