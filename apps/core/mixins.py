"""
Core View Mixins

Provides standardized authentication, error handling, and response patterns
for all API views in the application.
"""
import functools
from uuid import UUID

from rest_framework.response import Response

from .authentication import get_admin_context
from .context import AdminContext
from .exceptions import APIException as APIError
from .exceptions import AuthenticationError, ValidationError


class AuthenticatedAPIView:
    """
    Mixin providing standardized authentication and error handling.

    Usage:
        class MyView(AuthenticatedAPIView, APIView):
            def get(self, request):
                ctx = self.get_context(request)  # Raises if not authenticated
                # ... view logic
    """

    def get_context(self, request) -> AdminContext:
        """
        Get the admin request context or raise 401.
        """
        ctx = get_admin_context(request)
        if not ctx:
            raise AuthenticationError()
        return ctx

    def parse_uuid(self, value: str, field_name: str = "id") -> UUID:
        """
        Parse string to UUID or raise validation error.
        """
        if not value:
            raise ValidationError(f"{field_name} is required")
        try:
            return UUID(str(value))
        except ValueError as err:
            raise ValidationError(f"Invalid {field_name} format") from err

    def parse_uuid_optional(self, value: str) -> UUID | None:
        """Parse string to UUID, return None if empty or invalid."""
        if not value:
            return None
        try:
            return UUID(str(value))
        except ValueError:
            return None

    def parse_bool(self, value) -> bool:
        """Interpret query-string style booleans."""
        return str(value).lower() in ('1', 'true', 'yes')

    def success_response(self, data=None, status_code: int = 200) -> Response:
        """Build standardized success response."""
        if data is None:
            data = {"success": True}
        return Response(data, status=status_code)


def handle_api_errors(func):
    """
    Decorator to handle APIError exceptions in view methods.

    Usage:
        @handle_api_errors
        def get(self, request):
            ctx = self.get_context(request)
            # ...
    """
    @functools.wraps(func)
    def wrapper(self, request, *args, **kwargs):
        try:
            return func(self, request, *args, **kwargs)
        except APIError as e:
            return Response(e.to_response_data(), status=e.status_code)
    return wrapper
