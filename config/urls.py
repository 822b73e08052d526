"""URL configuration for the guesthouse booking service.

The `urlpatterns` list routes URLs to views. It includes the Django admin
site, the API schema and the application‑level routers provided by Django
Rest Framework and each app.
"""
from django.contrib import admin  # type: ignore
from django.urls import path, include  # type: ignore
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView  # type: ignore

from .views import health

urlpatterns = [
    path('django-admin/', admin.site.urls),
    path('api/health/', health, name='health'),
    path('api/schema/', SpectacularAPIView.as_view(), name='schema'),
    path('api/docs/', SpectacularSwaggerView.as_view(url_name='schema'), name='docs'),
    # Public API
    path('api/room-types/', include('apps.rooms.urls')),
    path('api/bookings/', include('apps.bookings.urls')),
    path('api/payments/', include('apps.payments.urls')),
    path('api/contact/', include('apps.contact.urls')),
    # Admin API
    path('api/admin/', include('apps.users.urls')),
    path('api/admin/', include('apps.rooms.admin_urls')),
    path('api/admin/', include('apps.bookings.admin_urls')),
    path('api/admin/', include('apps.analytics.urls')),
    path('api/admin/', include('apps.contact.admin_urls')),
]
