"""
Authentication for Django REST Framework

- SupabaseJWTAuthentication: dashboard sessions issued by Supabase Auth
- AdminTokenAuthentication: signed X-Admin-Token header used by the proxy
  endpoints

Both resolve to an AuthenticatedAdmin carrying the admin's division scope.
"""
import logging
from dataclasses import dataclass, field
from uuid import UUID

import jwt
from django.conf import settings
from rest_framework import authentication, exceptions

from .admin_tokens import AdminTokenError, verify_admin_token
from .context import AdminContext

logger = logging.getLogger(__name__)


@dataclass
class AuthenticatedAdmin:
    """
    Represents an authenticated dashboard user.

    This is NOT a Django User model - it's a lightweight container
    for the admin context derived from the token and the admins table.
    """
    id: UUID                          # auth.users.id / profiles.id
    email: str
    admin_id: UUID | None             # admins.id (None for super admins without a row)
    division_id: UUID | None
    additional_division_ids: list[UUID] = field(default_factory=list)
    access_all_divisions: bool = False
    is_super_admin: bool = False
    is_active: bool = True

    @property
    def is_authenticated(self) -> bool:
        return True

    @property
    def is_admin(self) -> bool:
        return self.is_super_admin or self.admin_id is not None

    @property
    def role(self) -> str:
        if self.is_super_admin:
            return 'super_admin'
        return 'admin' if self.admin_id else 'member'

    def to_context(self, token: str | None = None) -> AdminContext:
        """Build the explicit request context passed to services."""
        return AdminContext.from_admin(self, token=token)


def _parse_uuid_list(values) -> list[UUID]:
    result = []
    for value in values or []:
        try:
            result.append(UUID(str(value)))
        except ValueError:
            logger.warning(f'Ignoring invalid division id: {value!r}')
    return result


def load_admin(user_id: UUID, email: str = '') -> AuthenticatedAdmin | None:
    """
    Load the admin context for an auth user.

    Returns None when the user is neither an active admin nor a super admin.
    """
    from .models import Admin, Profile, UserRole

    is_super_admin = UserRole.objects.filter(  # type: ignore[attr-defined]
        user_id=user_id, role='super_admin'
    ).exists()
    admin = (
        Admin.objects.filter(user_id=user_id, is_active=True)  # type: ignore[attr-defined]
        .order_by('created_at')
        .first()
    )

    if not admin and not is_super_admin:
        return None

    if not email:
        profile = Profile.objects.filter(id=user_id).values('email').first()  # type: ignore[attr-defined]
        email = profile['email'] if profile else ''

    return AuthenticatedAdmin(
        id=user_id,
        email=email,
        admin_id=admin.id if admin else None,
        division_id=admin.division_id if admin else None,
        additional_division_ids=_parse_uuid_list(admin.additional_division_ids) if admin else [],
        access_all_divisions=bool(admin and admin.access_all_divisions),
        is_super_admin=is_super_admin,
    )


class SupabaseJWTAuthentication(authentication.BaseAuthentication):
    """
    Authenticates requests using Supabase JWTs.

    Flow:
    1. Extract Bearer token from Authorization header
    2. Decode and validate JWT using Supabase JWT secret
    3. Look up the admin row / super admin role for the sub claim
    4. Return AuthenticatedAdmin with division scope
    """

    def authenticate(self, request):
        auth_header = request.META.get('HTTP_AUTHORIZATION', '')

        if not auth_header or not auth_header.startswith('Bearer '):
            return None

        token = auth_header[7:]  # Remove 'Bearer ' prefix
        if not token:
            return None

        payload = self._decode_jwt(token)
        if not payload:
            raise exceptions.AuthenticationFailed('Invalid or expired token')

        user = self._get_admin_from_payload(payload)
        if not user:
            raise exceptions.AuthenticationFailed('Admin access required')

        return (user, token)

    def authenticate_header(self, request):
        return 'Bearer realm="api"'

    def _decode_jwt(self, token: str) -> dict | None:
        jwt_secret = getattr(settings, 'SUPABASE_JWT_SECRET', None)

        if not jwt_secret:
            logger.error('SUPABASE_JWT_SECRET not configured')
            return None

        supabase_url = getattr(settings, 'SUPABASE_URL', '')
        expected_issuer = f'{supabase_url}/auth/v1' if supabase_url else None

        decode_kwargs = {
            'jwt': token,
            'key': jwt_secret,
            'algorithms': ['HS256'],
            'audience': 'authenticated',
            'options': {
                'verify_exp': True,
                'verify_aud': True,
                'verify_iss': bool(expected_issuer),
            },
        }
        if expected_issuer:
            decode_kwargs['issuer'] = expected_issuer

        try:
            return jwt.decode(**decode_kwargs)
        except jwt.ExpiredSignatureError:
            logger.debug('JWT has expired')
            return None
        except jwt.InvalidTokenError as e:
            logger.debug(f'JWT validation failed: {e}')
            return None

    def _get_admin_from_payload(self, payload: dict) -> AuthenticatedAdmin | None:
        sub = payload.get('sub')
        if not sub:
            logger.warning('JWT missing sub claim')
            return None

        try:
            user_id = UUID(sub)
        except ValueError:
            logger.warning(f'JWT sub claim is not a UUID: {sub}')
            return None

        admin = load_admin(user_id, email=payload.get('email', ''))
        if not admin:
            logger.info(f'No admin access for user {user_id}')
        return admin


class AdminTokenAuthentication(authentication.BaseAuthentication):
    """
    Authenticates requests using the signed X-Admin-Token header.

    The header is mandatory on the endpoints that use this class: missing,
    malformed, forged and expired tokens are all rejected with 401 before
    any table is read.
    """

    header = 'HTTP_X_ADMIN_TOKEN'

    def authenticate(self, request):
        token = request.META.get(self.header, '')

        try:
            claims = verify_admin_token(token)
        except AdminTokenError as e:
            raise exceptions.AuthenticationFailed(str(e)) from e

        try:
            user_id = UUID(claims['sub'])
        except ValueError as err:
            raise exceptions.AuthenticationFailed('Invalid admin token') from err

        admin = load_admin(user_id)
        if not admin:
            raise exceptions.AuthenticationFailed('Admin account is inactive')

        return (admin, token)

    def authenticate_header(self, request):
        return 'X-Admin-Token'


def get_user_context(request) -> AuthenticatedAdmin | None:
    """
    Utility function to get the authenticated admin from request.

    Returns:
        AuthenticatedAdmin if authenticated, None otherwise
    """
    user = getattr(request, 'user', None)
    if isinstance(user, AuthenticatedAdmin):
        return user
    return None


def get_admin_context(request) -> AdminContext | None:
    """Explicit request context for the authenticated admin, or None."""
    user = get_user_context(request)
    if user is None:
        return None
    token = getattr(request, 'auth', None)
    return user.to_context(token=token if isinstance(token, str) else None)
