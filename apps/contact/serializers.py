"""Serializers for contact messages."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from .models import ContactMessage


class ContactMessageSerializer(serializers.ModelSerializer):
    firstName = serializers.CharField(source="first_name", max_length=100)
    lastName = serializers.CharField(source="last_name", max_length=100)
    phone = serializers.CharField(max_length=40, required=False, allow_blank=True)
    isRead = serializers.ReadOnlyField(source="is_read")
    createdAt = serializers.ReadOnlyField(source="created_at")

    class Meta:
        model = ContactMessage
        fields = ["id", "firstName", "lastName", "email", "phone", "subject", "message", "isRead", "createdAt"]
        read_only_fields = ["id", "isRead", "createdAt"]
