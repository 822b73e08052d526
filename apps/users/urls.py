"""URL declarations for admin authentication."""

from __future__ import annotations

from django.urls import path  # type: ignore

from .views import AdminCreateView, LoginView, LogoutView, MeView

urlpatterns = [
    path("login/", LoginView.as_view(), name="admin-login"),
    path("logout/", LogoutView.as_view(), name="admin-logout"),
    path("me/", MeView.as_view(), name="admin-me"),
    path("create/", AdminCreateView.as_view(), name="admin-create"),
]
