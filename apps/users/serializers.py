"""Serializers for admin authentication and admin accounts."""

from __future__ import annotations

from typing import Any

from django.contrib.auth import get_user_model  # type: ignore
from django.contrib.auth.password_validation import validate_password  # type: ignore
from django.db import transaction  # type: ignore
from rest_framework import serializers  # type: ignore

User = get_user_model()

ROLE_ADMIN = "admin"
ROLE_SUPERADMIN = "superadmin"


class AdminUserSerializer(serializers.ModelSerializer):
    """Admin identity as stored in the session and returned by `me`."""

    firstName = serializers.ReadOnlyField(source="first_name")
    lastName = serializers.ReadOnlyField(source="last_name")
    role = serializers.SerializerMethodField()
    lastLogin = serializers.ReadOnlyField(source="last_login")

    class Meta:
        model = User
        fields = ["id", "username", "email", "firstName", "lastName", "role", "lastLogin"]
        read_only_fields = fields

    def get_role(self, obj) -> str:  # type: ignore
        return ROLE_SUPERADMIN if obj.is_superuser else ROLE_ADMIN


class LoginSerializer(serializers.Serializer):
    login = serializers.CharField()
    password = serializers.CharField(write_only=True, trim_whitespace=False)

    def validate(self, attrs: dict[str, Any]) -> dict[str, Any]:  # type: ignore
        login = attrs.get("login", "").strip()
        password = attrs.get("password", "")

        # Find staff user by username or email
        lookup = {"email__iexact": login} if "@" in login else {"username": login}
        user = User.objects.filter(is_active=True, is_staff=True, **lookup).first()
        if user is None or not user.check_password(password):
            raise serializers.ValidationError({"login": "Invalid credentials."})

        attrs["user"] = user
        return attrs


class AdminCreateSerializer(serializers.Serializer):
    username = serializers.CharField(max_length=150)
    email = serializers.EmailField()
    password = serializers.CharField(min_length=8, write_only=True, trim_whitespace=False)
    firstName = serializers.CharField(max_length=150)
    lastName = serializers.CharField(max_length=150)
    role = serializers.ChoiceField(choices=[ROLE_ADMIN, ROLE_SUPERADMIN], required=False, default=ROLE_ADMIN)

    def validate_username(self, value: str) -> str:
        value = value.strip()
        if User.objects.filter(username__iexact=value).exists():
            raise serializers.ValidationError("An admin with this username already exists.")
        return value

    def validate_email(self, value: str) -> str:
        value = value.strip().lower()
        if User.objects.filter(email__iexact=value).exists():
            raise serializers.ValidationError("An admin with this email already exists.")
        return value

    def validate_password(self, value: str) -> str:
        validate_password(value)
        return value

    @transaction.atomic
    def create(self, validated_data: dict[str, Any]):  # type: ignore
        superuser = validated_data.get("role") == ROLE_SUPERADMIN
        return User.objects.create_user(
            username=validated_data["username"],
            email=validated_data["email"],
            password=validated_data["password"],
            first_name=validated_data["firstName"],
            last_name=validated_data["lastName"],
            is_staff=True,
            is_superuser=superuser,
        )
