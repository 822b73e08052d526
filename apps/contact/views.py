"""API views for the contact form and the admin inbox."""

from __future__ import annotations

import logging

from django_filters.rest_framework import DjangoFilterBackend  # type: ignore
from drf_spectacular.utils import extend_schema  # type: ignore
from rest_framework import mixins, permissions, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore

from apps.users.api.permissions import IsGuesthouseAdmin

from .models import ContactMessage
from .serializers import ContactMessageSerializer

logger = logging.getLogger(__name__)


class ContactMessageViewSet(mixins.CreateModelMixin, viewsets.GenericViewSet):
    """Public endpoint accepting contact form submissions."""

    queryset = ContactMessage.objects.all()
    serializer_class = ContactMessageSerializer
    permission_classes = [permissions.AllowAny]

    def perform_create(self, serializer):  # type: ignore
        message = serializer.save()
        logger.info(f"Contact message {message.pk} received from {message.email}")


class AdminContactMessageViewSet(mixins.ListModelMixin, mixins.RetrieveModelMixin, viewsets.GenericViewSet):
    """Admin inbox; messages are listed newest first."""

    queryset = ContactMessage.objects.all()
    serializer_class = ContactMessageSerializer
    permission_classes = [IsGuesthouseAdmin]
    filter_backends = [DjangoFilterBackend]
    filterset_fields = ["is_read"]
    pagination_class = None
    lookup_value_regex = r"\d+"

    @extend_schema(request=None, responses=ContactMessageSerializer)
    @action(detail=True, methods=["post", "patch"])
    def read(self, request, pk=None):  # type: ignore
        message: ContactMessage = self.get_object()  # type: ignore
        message.mark_read()
        return Response(self.get_serializer(message).data)
