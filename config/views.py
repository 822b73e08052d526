"""Service-level endpoints that do not belong to a domain app."""

from __future__ import annotations

from django.conf import settings  # type: ignore
from django.utils import timezone  # type: ignore
from rest_framework.decorators import api_view, permission_classes  # type: ignore
from rest_framework.permissions import AllowAny  # type: ignore
from rest_framework.response import Response  # type: ignore


@api_view(["GET"])
@permission_classes([AllowAny])
def health(request):  # type: ignore
    return Response({"ok": True, "name": settings.GUESTHOUSE_NAME, "ts": timezone.now().isoformat()})
