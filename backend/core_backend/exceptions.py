"""
Error taxonomy shared by every POS app, and the DRF exception handler that
renders it.

Services raise these exceptions; views let them propagate. The handler turns
them into ``{"message": ...}`` responses with the matching status code.
"""
import logging

from django.core.exceptions import ObjectDoesNotExist
from django.db import DatabaseError
from django.http import Http404
from rest_framework import status
from rest_framework import exceptions as drf_exceptions
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class POSError(Exception):
    """Base exception for POS domain errors."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message, details=None):
        super().__init__(message)
        self.message = message
        self.details = details


class ValidationError(POSError, ValueError):
    """Malformed or missing input, or a rule the request breaks."""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(POSError):
    """A referenced entity does not exist."""

    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(POSError):
    """Duplicate unique key, or an entity in a state that forbids the operation."""

    status_code = status.HTTP_409_CONFLICT


class PartialFailure(POSError):
    """
    Raised by batch operations where some items succeeded and were persisted
    while others failed. ``errors`` holds one entry per failed item.
    """

    status_code = status.HTTP_207_MULTI_STATUS

    def __init__(self, message, errors):
        super().__init__(message, details=errors)
        self.errors = errors


def _flatten_drf_detail(detail):
    """Collapse DRF's nested error detail into one readable line."""
    if isinstance(detail, dict):
        parts = []
        for field, value in detail.items():
            text = _flatten_drf_detail(value)
            parts.append(text if field == "non_field_errors" else f"{field}: {text}")
        return "; ".join(parts)
    if isinstance(detail, (list, tuple)):
        return "; ".join(_flatten_drf_detail(item) for item in detail)
    return str(detail)


def pos_exception_handler(exc, context):
    """
    DRF exception handler for the POS API.

    - POSError subclasses map to their own status code
    - DRF exceptions keep their status but use the ``message`` shape
    - ObjectDoesNotExist becomes 404
    - database errors (failed transactions) become 500 with the driver message
    """
    request = context.get("request")
    path = request.path if request is not None else ""

    if isinstance(exc, PartialFailure):
        return Response(
            {"message": exc.message, "errors": exc.errors},
            status=exc.status_code,
        )

    if isinstance(exc, POSError):
        if exc.status_code >= 500:
            logger.error(f"POS error on {path}: {exc.message}")
        else:
            logger.info(f"{exc.__class__.__name__} on {path}: {exc.message}")
        data = {"message": exc.message}
        if exc.details:
            data["errors"] = exc.details
        return Response(data, status=exc.status_code)

    if isinstance(exc, ObjectDoesNotExist):
        exc = Http404(str(exc))

    response = exception_handler(exc, context)
    if response is not None:
        detail = response.data
        if isinstance(exc, drf_exceptions.ValidationError):
            response.data = {"message": _flatten_drf_detail(detail), "errors": detail}
        elif isinstance(detail, dict) and "detail" in detail:
            response.data = {"message": str(detail["detail"])}
        else:
            response.data = {"message": _flatten_drf_detail(detail)}
        return response

    if isinstance(exc, DatabaseError):
        logger.error(f"Transaction failed on {path}: {exc}")
        return Response(
            {"message": str(exc)},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    return None
