import pytest
from django.core.exceptions import ObjectDoesNotExist
from django.db import IntegrityError
from rest_framework import serializers, status
from rest_framework.test import APIRequestFactory

from core_backend.exceptions import (
    ConflictError,
    NotFoundError,
    PartialFailure,
    ValidationError,
    pos_exception_handler,
)


@pytest.fixture
def context():
    return {"request": APIRequestFactory().get("/api/orders/")}


class TestPosExceptionHandler:

    @pytest.mark.parametrize(
        "exc, expected_status",
        [
            (ValidationError("Guests must be positive"), status.HTTP_400_BAD_REQUEST),
            (NotFoundError("Order not found"), status.HTTP_404_NOT_FOUND),
            (ConflictError("Table already open"), status.HTTP_409_CONFLICT),
        ],
    )
    def test_pos_errors_keep_their_status(self, exc, expected_status, context):
        response = pos_exception_handler(exc, context)

        assert response.status_code == expected_status
        assert response.data == {"message": exc.message}

    def test_details_are_rendered_as_errors(self, context):
        response = pos_exception_handler(
            ValidationError("Invalid payment", details=["amount"]), context
        )

        assert response.data["errors"] == ["amount"]

    def test_partial_failure(self, context):
        response = pos_exception_handler(
            PartialFailure("Some employee reports failed", ["Ana: boom"]), context
        )

        assert response.status_code == status.HTTP_207_MULTI_STATUS
        assert response.data == {"message": "Some employee reports failed", "errors": ["Ana: boom"]}

    def test_drf_validation_error_is_flattened(self, context):
        exc = serializers.ValidationError({"guests": ["This field is required."]})

        response = pos_exception_handler(exc, context)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data["message"] == "guests: This field is required."

    def test_object_does_not_exist_is_404(self, context):
        response = pos_exception_handler(ObjectDoesNotExist("gone"), context)

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_database_error_is_500(self, context):
        response = pos_exception_handler(IntegrityError("duplicate key"), context)

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.data == {"message": "duplicate key"}

    def test_unknown_exception_is_left_to_django(self, context):
        assert pos_exception_handler(RuntimeError("boom"), context) is None

    def test_validation_error_is_a_value_error(self):
        assert isinstance(ValidationError("bad"), ValueError)
