"""URL routing for payments."""

from __future__ import annotations

from django.urls import path  # type: ignore

from .views import payment_config, paystack_webhook, verify_payment

urlpatterns = [
    path("verify/", verify_payment, name="payment-verify"),
    path("webhook/", paystack_webhook, name="payment-webhook"),
    path("config/", payment_config, name="payment-config"),
]
