"""
Payment API views

`verify` is called by the frontend after Paystack redirects the guest
back; `webhook` receives Paystack's server-to-server events. Both run the
same idempotent confirmation, so whichever arrives first confirms the
booking and the other is a no-op.
"""

from __future__ import annotations

import json
import logging

from django.conf import settings  # type: ignore
from django.http import HttpRequest, HttpResponse, JsonResponse  # type: ignore
from django.views.decorators.csrf import csrf_exempt  # type: ignore
from django.views.decorators.http import require_POST  # type: ignore
from drf_spectacular.utils import extend_schema  # type: ignore
from rest_framework import permissions  # type: ignore
from rest_framework.decorators import api_view, permission_classes  # type: ignore
from rest_framework.response import Response  # type: ignore

from shared.domain.exceptions import PaymentGatewayError

from . import services
from .gateway import PaystackGateway
from .serializers import VerifyPaymentSerializer

logger = logging.getLogger(__name__)

SIGNATURE_HEADER = "HTTP_X_PAYSTACK_SIGNATURE"


@extend_schema(request=VerifyPaymentSerializer)
@api_view(["POST"])
@permission_classes([permissions.AllowAny])
def verify_payment(request):  # type: ignore
    payload = VerifyPaymentSerializer(data=request.data)
    payload.is_valid(raise_exception=True)
    outcome = services.verify_payment(payload.validated_data["reference"])
    return Response(outcome.as_dict())


@api_view(["GET"])
@permission_classes([permissions.AllowAny])
def payment_config(request):  # type: ignore
    gateway = PaystackGateway.from_settings()
    return Response(
        {
            "configured": gateway.configured,
            "sandbox": gateway.uses_sandbox,
            "publicKey": gateway.public_key,
            "currency": settings.DEFAULT_CURRENCY,
        }
    )


@csrf_exempt
@require_POST
def paystack_webhook(request: HttpRequest) -> HttpResponse:
    """
    Handle Paystack events.

    The signature is checked against the raw body before anything is
    parsed. Paystack retries deliveries that do not get a 2xx answer.
    """
    gateway = PaystackGateway.from_settings()
    if not gateway.verify_signature(request.body, request.META.get(SIGNATURE_HEADER)):
        logger.warning("Rejected Paystack webhook with an invalid signature")
        return JsonResponse({"message": "Invalid signature", "code": "invalid_signature"}, status=401)

    try:
        event = json.loads(request.body.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        logger.error(f"Webhook JSON decode error: {e}")
        return JsonResponse({"message": "Invalid JSON", "code": "invalid"}, status=400)
    if not isinstance(event, dict):
        return JsonResponse({"message": "Invalid event", "code": "invalid"}, status=400)

    try:
        services.handle_webhook_event(event, gateway)
    except PaymentGatewayError as e:
        logger.error(f"Webhook verification failed: {e.message}")
        return JsonResponse({"message": e.message, "code": e.code}, status=502)
    return JsonResponse({"received": True})
