"""Serializers for payment endpoints."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore


class VerifyPaymentSerializer(serializers.Serializer):
    reference = serializers.CharField(max_length=32)

    def validate_reference(self, value: str) -> str:
        return value.strip()
