"""Tests for rendering errors as API responses."""

from __future__ import annotations

from django.db import OperationalError
from rest_framework import status
from rest_framework.exceptions import NotAuthenticated
from rest_framework.exceptions import ValidationError as DRFValidationError

from shared.api.exceptions import api_exception_handler
from shared.domain import exceptions as domain


def handle(exc):
    return api_exception_handler(exc, {"view": None})


def test_domain_errors_map_to_status_codes() -> None:
    cases = [
        (domain.InvalidDateRange(), status.HTTP_400_BAD_REQUEST, "invalid_date_range"),
        (domain.NotFoundError("Room type not found."), status.HTTP_404_NOT_FOUND, "not_found"),
        (domain.NoCapacity(), status.HTTP_409_CONFLICT, "no_capacity"),
        (domain.UnitConflict(), status.HTTP_409_CONFLICT, "unit_conflict"),
        (domain.InvalidTransition(), status.HTTP_409_CONFLICT, "invalid_transition"),
        (domain.PaymentGatewayError(), status.HTTP_502_BAD_GATEWAY, "payment_gateway_error"),
        (domain.PersistenceError(), status.HTTP_503_SERVICE_UNAVAILABLE, "persistence_error"),
    ]
    for exc, expected_status, code in cases:
        response = handle(exc)
        assert response.status_code == expected_status
        assert response.data["code"] == code
        assert response.data["message"] == exc.message


def test_capacity_errors_name_the_rule() -> None:
    response = handle(domain.CapacityError("Too many guests.", rule="capacity_exceeded"))

    assert response.data == {"message": "Too many guests.", "code": "unavailable", "rule": "capacity_exceeded"}


def test_serializer_errors_keep_field_detail() -> None:
    response = handle(DRFValidationError({"checkoutDate": ["Check-out date must be after check-in date."]}))

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.data["message"] == "Check-out date must be after check-in date."
    assert response.data["code"] == "invalid"
    assert "checkoutDate" in response.data["errors"]


def test_database_errors_become_service_unavailable() -> None:
    response = handle(OperationalError("database is locked"))

    assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
    assert response.data["code"] == "persistence_error"


def test_drf_errors_are_flattened() -> None:
    response = handle(NotAuthenticated())

    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.data["code"] == "not_authenticated"
