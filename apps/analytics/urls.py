"""URL routing for analytics endpoints."""

from django.urls import path  # type: ignore

from .views import StatsView


urlpatterns = [
    # Mounted under api/admin/ in config.urls
    path('stats/', StatsView.as_view(), name='admin-stats'),
]
