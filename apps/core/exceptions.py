"""
Custom Exception Handling for E-Life Admin Backend

Every error leaves the API as:
{
    "error": "ErrorType",
    "message": "Human-readable error message",
    "details": {...}  // Optional, additional context
}
"""
import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class APIException(Exception):
    """
    Base exception class for API errors.

    Usage:
        raise APIException('Something went wrong', status_code=400)
    """
    def __init__(self, message: str, status_code: int = 400, details: dict | None = None):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)

    @property
    def error_code(self) -> str:
        return self.__class__.__name__

    def to_response_data(self) -> dict:
        data = {'error': self.error_code, 'message': self.message}
        if self.details:
            data['details'] = self.details
        return data


class ValidationError(APIException):
    """Raised when request validation fails."""
    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message, status_code=400, details=details)


class AuthenticationError(APIException):
    """Raised when a view needs an admin context and the request has none."""
    def __init__(self, message: str = 'Authentication required'):
        super().__init__(message, status_code=401)


class PermissionDeniedError(APIException):
    """Raised when user lacks permission."""
    def __init__(self, message: str = 'Permission denied'):
        super().__init__(message, status_code=403)


class NotFoundError(APIException):
    """Raised when a resource is not found."""
    def __init__(self, message: str = 'Resource not found'):
        super().__init__(message, status_code=404)


class StatsUnavailableError(APIException):
    """
    Raised when any query behind a statistics aggregation fails.

    The aggregation is all-or-nothing: partial results are discarded and
    only this single message reaches the client.
    """
    error_code = 'StatsUnavailable'

    def __init__(self, message: str = 'Failed to load statistics'):
        super().__init__(message, status_code=502)


def _flatten_detail(detail) -> str:
    if isinstance(detail, dict):
        parts = []
        for field, errors in detail.items():
            if isinstance(errors, list):
                parts.append(f"{field}: {', '.join(str(e) for e in errors)}")
            else:
                parts.append(f"{field}: {errors}")
        return '; '.join(parts)
    if isinstance(detail, list):
        return ', '.join(str(e) for e in detail)
    return str(detail)


def custom_exception_handler(exc, context):
    """
    DRF exception handler producing the error envelope above.

    Our own APIException family maps directly. DRF exceptions (authentication,
    permission, parse errors) keep their status code. Anything else is logged
    and returned as a generic 500.
    """
    if isinstance(exc, APIException):
        return Response(exc.to_response_data(), status=exc.status_code)

    response = exception_handler(exc, context)

    if response is None:
        view = context.get('view')
        logger.exception(f'Unhandled exception in {view.__class__.__name__ if view else "view"}: {exc}')
        return Response(
            {
                'error': 'InternalServerError',
                'message': 'An unexpected error occurred',
            },
            status=status.HTTP_500_INTERNAL_SERVER_ERROR
        )

    detail = getattr(exc, 'detail', None)
    data = {
        'error': exc.__class__.__name__,
        'message': _flatten_detail(detail) if detail is not None else str(exc),
    }
    if isinstance(detail, dict):
        data['details'] = detail
    response.data = data
    return response
