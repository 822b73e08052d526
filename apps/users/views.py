"""Views for admin session authentication and admin account creation."""

from __future__ import annotations

import logging

from django.contrib.auth import get_user_model, login, logout  # type: ignore
from drf_spectacular.utils import extend_schema  # type: ignore
from rest_framework import status  # type: ignore
from rest_framework.exceptions import PermissionDenied  # type: ignore
from rest_framework.permissions import AllowAny  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import APIView  # type: ignore

from .api.permissions import IsGuesthouseAdmin
from .serializers import ROLE_SUPERADMIN, AdminCreateSerializer, AdminUserSerializer, LoginSerializer

logger = logging.getLogger(__name__)

User = get_user_model()


class LoginView(APIView):
    permission_classes = [AllowAny]

    @extend_schema(request=LoginSerializer, responses=AdminUserSerializer)
    def post(self, request):  # type: ignore
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.validated_data["user"]
        login(request, user)
        logger.info(f"Admin {user.username} logged in")
        return Response({"message": "Login successful", "admin": AdminUserSerializer(user).data})


class LogoutView(APIView):
    permission_classes = [AllowAny]

    @extend_schema(request=None)
    def post(self, request):  # type: ignore
        logout(request)
        return Response({"message": "Logout successful"})


class MeView(APIView):
    permission_classes = [IsGuesthouseAdmin]

    @extend_schema(responses=AdminUserSerializer)
    def get(self, request):  # type: ignore
        return Response(AdminUserSerializer(request.user).data)


class AdminCreateView(APIView):
    """
    Create an admin account.

    Only superadmins may create admins, except for the very first account:
    while no staff user exists the endpoint is open and the account it
    creates is always a superadmin.
    """

    permission_classes = [AllowAny]

    @extend_schema(request=AdminCreateSerializer, responses=AdminUserSerializer)
    def post(self, request):  # type: ignore
        bootstrap = not User.objects.filter(is_staff=True).exists()
        user = request.user
        if not bootstrap and not (user and user.is_authenticated and user.is_superuser):
            raise PermissionDenied("Superadmin privileges required.")

        data = request.data.copy()
        if bootstrap:
            data["role"] = ROLE_SUPERADMIN
        serializer = AdminCreateSerializer(data=data)
        serializer.is_valid(raise_exception=True)
        admin = serializer.save()
        logger.info(f"Admin account {admin.username} created (bootstrap={bootstrap})")
        return Response(AdminUserSerializer(admin).data, status=status.HTTP_201_CREATED)
