# apps/payments/gateway.py
"""
Paystack Payment Gateway Integration

Thin client for the three Paystack calls the booking flow needs
(transaction initialize, transaction verify, refund) plus webhook
signature verification. Amounts travel in minor units (cents).

Without a secret key the gateway either raises PaymentGatewayError or,
when PAYMENT_SANDBOX_MODE is on, returns sandbox sessions that verify as
paid. Production settings force sandbox mode off.
"""

from __future__ import annotations

import hashlib
import hmac
from dataclasses import dataclass, field

import requests
import structlog
from django.conf import settings  # type: ignore

from shared.domain.exceptions import PaymentGatewayError
from shared.domain.value_objects import Money

logger = structlog.get_logger(__name__)

SUCCESS = "success"
FAILED_STATUSES = ("failed", "abandoned", "reversed")


@dataclass(frozen=True)
class CheckoutSession:
    reference: str
    authorization_url: str
    access_code: str
    sandbox: bool = False

    def as_dict(self) -> dict:
        return {
            "reference": self.reference,
            "authorizationUrl": self.authorization_url,
            "accessCode": self.access_code,
            "sandbox": self.sandbox,
        }


@dataclass(frozen=True)
class PaymentVerification:
    reference: str
    status: str
    amount: Money | None = None
    paid_at: str | None = None
    channel: str = ""
    gateway_response: str = ""
    transaction_id: str = ""
    sandbox: bool = False
    raw: dict = field(default_factory=dict, compare=False, repr=False)

    @property
    def paid(self) -> bool:
        return self.status == SUCCESS

    @property
    def failed(self) -> bool:
        return self.status in FAILED_STATUSES


class PaystackGateway:
    """Paystack REST client with an explicit sandbox fallback."""

    def __init__(
        self,
        *,
        secret_key: str = "",
        public_key: str = "",
        base_url: str = "https://api.paystack.co",
        callback_url: str = "",
        timeout: float = 10.0,
        sandbox: bool = False,
        currency: str = "ZAR",
    ):
        self.secret_key = secret_key
        self.public_key = public_key
        self.base_url = base_url.rstrip("/")
        self.callback_url = callback_url
        self.timeout = timeout
        self.sandbox = sandbox
        self.currency = currency

    @classmethod
    def from_settings(cls) -> "PaystackGateway":
        return cls(
            secret_key=settings.PAYSTACK_SECRET_KEY,
            public_key=settings.PAYSTACK_PUBLIC_KEY,
            base_url=settings.PAYSTACK_BASE_URL,
            callback_url=settings.PAYSTACK_CALLBACK_URL,
            timeout=settings.PAYSTACK_TIMEOUT,
            sandbox=settings.PAYMENT_SANDBOX_MODE,
            currency=settings.DEFAULT_CURRENCY,
        )

    @property
    def configured(self) -> bool:
        return bool(self.secret_key)

    @property
    def uses_sandbox(self) -> bool:
        return not self.configured and self.sandbox

    def _ensure_usable(self) -> None:
        if not self.configured and not self.sandbox:
            raise PaymentGatewayError("Payment service not configured.")

    def _headers(self) -> dict:
        return {
            "Authorization": f"Bearer {self.secret_key}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

    def _request(self, method: str, path: str, **kwargs) -> dict:
        url = f"{self.base_url}{path}"
        try:
            response = requests.request(method, url, headers=self._headers(), timeout=self.timeout, **kwargs)
        except requests.exceptions.RequestException as e:
            logger.error("paystack_request_failed", path=path, error=str(e))
            raise PaymentGatewayError(f"Could not reach the payment provider: {e}") from e

        try:
            body = response.json()
        except ValueError:
            body = {}

        if response.status_code >= 400 or not body.get("status"):
            message = body.get("message") or f"HTTP {response.status_code}"
            logger.error("paystack_error", path=path, status_code=response.status_code, message=message)
            raise PaymentGatewayError(f"Payment provider error: {message}")
        return body.get("data") or {}

    def initialize(self, *, email: str, amount: Money, reference: str, metadata: dict | None = None) -> CheckoutSession:
        """Start a checkout for `amount` and return where to send the guest."""

        self._ensure_usable()
        if self.uses_sandbox:
            logger.warning("paystack_sandbox_checkout", reference=reference)
            callback = self.callback_url or "/payment/callback"
            return CheckoutSession(
                reference=reference,
                authorization_url=f"{callback}?reference={reference}&sandbox=1",
                access_code=f"sandbox_{reference}",
                sandbox=True,
            )

        payload = {
            "email": email,
            "amount": amount.minor_units,
            "currency": amount.currency,
            "reference": reference,
            "metadata": metadata or {},
        }
        if self.callback_url:
            payload["callback_url"] = self.callback_url

        data = self._request("POST", "/transaction/initialize", json=payload)
        logger.info("paystack_checkout_created", reference=reference, amount=amount.minor_units)
        return CheckoutSession(
            reference=data.get("reference", reference),
            authorization_url=data.get("authorization_url", ""),
            access_code=data.get("access_code", ""),
        )

    def verify(self, reference: str) -> PaymentVerification:
        self._ensure_usable()
        if self.uses_sandbox:
            logger.warning("paystack_sandbox_verify", reference=reference)
            return PaymentVerification(reference=reference, status=SUCCESS, channel="sandbox", sandbox=True)

        data = self._request("GET", f"/transaction/verify/{reference}")
        amount = None
        if data.get("amount") is not None:
            amount = Money.from_minor_units(int(data["amount"]), data.get("currency") or self.currency)
        return PaymentVerification(
            reference=data.get("reference", reference),
            status=str(data.get("status", "")).lower(),
            amount=amount,
            paid_at=data.get("paid_at") or data.get("paidAt"),
            channel=data.get("channel") or "",
            gateway_response=data.get("gateway_response") or "",
            transaction_id=str(data.get("id") or ""),
            raw=data,
        )

    def refund(self, reference: str, amount: Money | None = None, reason: str = "") -> dict:
        """Refund a captured transaction, fully unless `amount` is given."""

        self._ensure_usable()
        if self.uses_sandbox:
            logger.warning("paystack_sandbox_refund", reference=reference)
            return {"status": "processed", "transaction": reference, "sandbox": True}

        payload: dict = {"transaction": reference}
        if amount is not None:
            payload["amount"] = amount.minor_units
        if reason:
            payload["merchant_note"] = reason
        data = self._request("POST", "/refund", json=payload)
        logger.info("paystack_refund_created", reference=reference)
        return data

    def verify_signature(self, body: bytes, signature: str | None) -> bool:
        """Check the X-Paystack-Signature header (HMAC-SHA512 of the raw body)."""

        if not self.configured:
            # Sandbox webhooks carry no signature
            return self.sandbox
        if not signature:
            return False
        digest = hmac.new(self.secret_key.encode("utf-8"), body, hashlib.sha512).hexdigest()
        return hmac.compare_digest(digest, signature)
