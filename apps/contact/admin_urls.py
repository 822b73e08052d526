"""URL routing for the admin contact inbox."""

from __future__ import annotations

from django.urls import include, path  # type: ignore
from rest_framework.routers import SimpleRouter  # type: ignore

from .views import AdminContactMessageViewSet

router = SimpleRouter()
router.register(r"contact", AdminContactMessageViewSet, basename="admin-contact")

urlpatterns = [
    path("", include(router.urls)),
]
