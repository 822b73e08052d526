"""URL routing for the public room catalog."""

from __future__ import annotations

from django.urls import include, path  # type: ignore
from rest_framework.routers import SimpleRouter  # type: ignore

from .views import RoomTypeViewSet

router = SimpleRouter()
router.register(r"", RoomTypeViewSet, basename="room-type")

urlpatterns = [
    path("", include(router.urls)),
]
