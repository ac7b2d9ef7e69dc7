"""Mapping of domain errors to HTTP responses."""

import logging

from django.db import DatabaseError
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from offers.domain.errors import DomainError, ErrorCode

logger = logging.getLogger(__name__)

STATUS_BY_CODE = {
    ErrorCode.OFFER_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.APPLICATION_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    ErrorCode.INVALID_TRANSITION: status.HTTP_400_BAD_REQUEST,
    ErrorCode.DUPLICATE_APPLICATION: status.HTTP_400_BAD_REQUEST,
    ErrorCode.OFFER_CLOSED: status.HTTP_400_BAD_REQUEST,
    ErrorCode.NOT_ELIGIBLE: status.HTTP_400_BAD_REQUEST,
    ErrorCode.VALIDATION_ERROR: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_ID: status.HTTP_400_BAD_REQUEST,
    ErrorCode.CONCURRENT_MODIFICATION: status.HTTP_409_CONFLICT,
}


def error_response(error: DomainError) -> Response:
    return Response(
        {"code": error.code.value, "message": error.message},
        status=STATUS_BY_CODE.get(error.code, status.HTTP_400_BAD_REQUEST),
    )


def domain_exception_handler(exc, context):
    """DRF exception handler that understands domain errors."""
    if isinstance(exc, DomainError):
        return error_response(exc)
    if isinstance(exc, DatabaseError):
        logger.exception("Database failure in %s", context.get("view"))
        return Response(
            {"code": "INTERNAL_ERROR", "message": "Internal server error"},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
    return exception_handler(exc, context)
