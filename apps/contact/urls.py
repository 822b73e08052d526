"""URL routing for the public contact form."""

from __future__ import annotations

from django.urls import include, path  # type: ignore
from rest_framework.routers import SimpleRouter  # type: ignore

from .views import ContactMessageViewSet

router = SimpleRouter()
router.register(r"", ContactMessageViewSet, basename="contact")

urlpatterns = [
    path("", include(router.urls)),
]
