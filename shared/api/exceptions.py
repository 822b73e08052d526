"""DRF exception handler rendering domain errors as `{message, code, ...}`."""

from __future__ import annotations

import structlog
from django.db import DatabaseError  # type: ignore
from rest_framework import status  # type: ignore
from rest_framework.exceptions import ValidationError as DRFValidationError  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import exception_handler as drf_exception_handler  # type: ignore

from shared.domain import exceptions as domain

logger = structlog.get_logger(__name__)

STATUS_BY_ERROR = (
    (domain.ValidationError, status.HTTP_400_BAD_REQUEST),
    (domain.NotFoundError, status.HTTP_404_NOT_FOUND),
    (domain.CapacityError, status.HTTP_409_CONFLICT),
    (domain.ConflictError, status.HTTP_409_CONFLICT),
    (domain.PaymentGatewayError, status.HTTP_502_BAD_GATEWAY),
    (domain.PersistenceError, status.HTTP_503_SERVICE_UNAVAILABLE),
)


def _status_for(exc: domain.DomainError) -> int:
    for error_class, http_status in STATUS_BY_ERROR:
        if isinstance(exc, error_class):
            return http_status
    return status.HTTP_400_BAD_REQUEST


def _first_message(detail) -> str:
    if isinstance(detail, dict):
        for value in detail.values():
            return _first_message(value)
    if isinstance(detail, (list, tuple)) and detail:
        return _first_message(detail[0])
    return str(detail)


def render_domain_error(exc: domain.DomainError) -> Response:
    payload: dict = {"message": exc.message, "code": exc.code}
    if isinstance(exc, domain.CapacityError) and exc.rule:
        payload["rule"] = exc.rule
    if isinstance(exc, domain.ValidationError) and exc.errors:
        payload["errors"] = exc.errors
    return Response(payload, status=_status_for(exc))


def api_exception_handler(exc, context):
    """Entry point configured as REST_FRAMEWORK['EXCEPTION_HANDLER']."""

    if isinstance(exc, DatabaseError):
        logger.error("database_error", view=type(context.get("view")).__name__, error=str(exc))
        exc = domain.PersistenceError()

    if isinstance(exc, domain.DomainError):
        return render_domain_error(exc)

    response = drf_exception_handler(exc, context)
    if response is None:
        return None

    if isinstance(exc, DRFValidationError):
        errors = response.data if isinstance(response.data, dict) else {"non_field_errors": response.data}
        response.data = {
            "message": _first_message(response.data),
            "code": "invalid",
            "errors": errors,
        }
        return response

    detail = response.data.get("detail", "") if isinstance(response.data, dict) else response.data
    response.data = {
        "message": str(detail),
        "code": getattr(detail, "code", "error"),
    }
    return response
