"""Tests for the Paystack client with the HTTP layer mocked out."""

from __future__ import annotations

import hashlib
import hmac
from decimal import Decimal
from unittest import mock

import pytest
import requests

from apps.payments.gateway import PaystackGateway
from shared.domain.exceptions import PaymentGatewayError
from shared.domain.value_objects import Money


def live_gateway(**overrides) -> PaystackGateway:
    values = {
        "secret_key": "sk_test_secret",
        "public_key": "pk_test_public",
        "base_url": "https://api.paystack.test/",
        "callback_url": "https://guesthouse.test/payment/callback",
        "timeout": 5.0,
    }
    values.update(overrides)
    return PaystackGateway(**values)


def fake_response(status_code: int = 200, body: dict | None = None):
    response = mock.Mock()
    response.status_code = status_code
    response.json.return_value = body if body is not None else {}
    return response


@mock.patch("apps.payments.gateway.requests.request")
def test_initialize_sends_amount_in_cents(request_mock) -> None:
    request_mock.return_value = fake_response(
        body={
            "status": True,
            "data": {
                "authorization_url": "https://checkout.paystack.com/abc",
                "access_code": "abc",
                "reference": "PHK-25-ABC123",
            },
        }
    )

    session = live_gateway().initialize(
        email="guest@example.com",
        amount=Money(Decimal("2550.00"), "ZAR"),
        reference="PHK-25-ABC123",
    )

    method, url = request_mock.call_args.args
    kwargs = request_mock.call_args.kwargs
    assert method == "POST"
    assert url == "https://api.paystack.test/transaction/initialize"
    assert kwargs["json"]["amount"] == 255000
    assert kwargs["json"]["currency"] == "ZAR"
    assert kwargs["json"]["callback_url"] == "https://guesthouse.test/payment/callback"
    assert kwargs["headers"]["Authorization"] == "Bearer sk_test_secret"
    assert kwargs["timeout"] == 5.0
    assert session.as_dict() == {
        "reference": "PHK-25-ABC123",
        "authorizationUrl": "https://checkout.paystack.com/abc",
        "accessCode": "abc",
        "sandbox": False,
    }


@mock.patch("apps.payments.gateway.requests.request")
def test_verify_parses_transaction(request_mock) -> None:
    request_mock.return_value = fake_response(
        body={
            "status": True,
            "data": {
                "id": 4099260516,
                "status": "success",
                "reference": "PHK-25-ABC123",
                "amount": 255000,
                "currency": "ZAR",
                "channel": "card",
                "gateway_response": "Successful",
                "paid_at": "2025-01-15T10:00:00.000Z",
            },
        }
    )

    verification = live_gateway().verify("PHK-25-ABC123")

    assert request_mock.call_args.args == ("GET", "https://api.paystack.test/transaction/verify/PHK-25-ABC123")
    assert verification.paid
    assert not verification.failed
    assert verification.amount == Money(Decimal("2550.00"), "ZAR")
    assert verification.transaction_id == "4099260516"


@mock.patch("apps.payments.gateway.requests.request")
def test_abandoned_transaction_counts_as_failed(request_mock) -> None:
    request_mock.return_value = fake_response(
        body={"status": True, "data": {"status": "abandoned", "reference": "PHK-25-ABC123"}}
    )

    verification = live_gateway().verify("PHK-25-ABC123")

    assert verification.failed
    assert not verification.paid
    assert verification.amount is None


@mock.patch("apps.payments.gateway.requests.request")
def test_provider_errors_raise(request_mock) -> None:
    request_mock.return_value = fake_response(400, {"status": False, "message": "Invalid key"})
    with pytest.raises(PaymentGatewayError, match="Invalid key"):
        live_gateway().verify("PHK-25-ABC123")

    request_mock.side_effect = requests.exceptions.Timeout("slow")
    with pytest.raises(PaymentGatewayError):
        live_gateway().verify("PHK-25-ABC123")


@mock.patch("apps.payments.gateway.requests.request")
def test_refund_posts_transaction_and_note(request_mock) -> None:
    request_mock.return_value = fake_response(body={"status": True, "data": {"status": "pending"}})

    live_gateway().refund("4099260516", reason="Guest request")

    assert request_mock.call_args.args == ("POST", "https://api.paystack.test/refund")
    assert request_mock.call_args.kwargs["json"] == {"transaction": "4099260516", "merchant_note": "Guest request"}


@mock.patch("apps.payments.gateway.requests.request")
def test_sandbox_never_calls_the_network(request_mock) -> None:
    gateway = PaystackGateway(sandbox=True, callback_url="https://guesthouse.test/cb")

    session = gateway.initialize(email="g@example.com", amount=Money(Decimal("10")), reference="PHK-25-SANDBX")
    verification = gateway.verify("PHK-25-SANDBX")

    request_mock.assert_not_called()
    assert session.sandbox
    assert session.authorization_url == "https://guesthouse.test/cb?reference=PHK-25-SANDBX&sandbox=1"
    assert verification.paid
    assert verification.sandbox


def test_unconfigured_gateway_without_sandbox_refuses() -> None:
    gateway = PaystackGateway(sandbox=False)

    with pytest.raises(PaymentGatewayError, match="not configured"):
        gateway.initialize(email="g@example.com", amount=Money(Decimal("10")), reference="PHK-25-NOPE00")


def test_configured_key_disables_sandbox() -> None:
    gateway = live_gateway(sandbox=True)

    assert gateway.configured
    assert not gateway.uses_sandbox


def test_webhook_signature_is_hmac_sha512() -> None:
    gateway = live_gateway()
    body = b'{"event":"charge.success","data":{"reference":"PHK-25-ABC123"}}'
    signature = hmac.new(b"sk_test_secret", body, hashlib.sha512).hexdigest()

    assert gateway.verify_signature(body, signature)
    assert not gateway.verify_signature(body, "0" * 128)
    assert not gateway.verify_signature(body, None)
    assert not gateway.verify_signature(body + b" ", signature)


def test_unsigned_webhooks_only_in_sandbox() -> None:
    assert PaystackGateway(sandbox=True).verify_signature(b"{}", None)
    assert not PaystackGateway(sandbox=False).verify_signature(b"{}", None)
