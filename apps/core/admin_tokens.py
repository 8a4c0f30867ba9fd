"""
Signed admin tokens for the X-Admin-Token header.

Tokens are HS256 JWTs signed with ADMIN_TOKEN_SECRET and always carry an
`exp` claim. Verification checks the signature before anything else, so an
unsigned or tampered token is rejected even if its expiry looks valid.
"""
import logging
from datetime import datetime, timedelta, timezone
from uuid import UUID

import jwt
from django.conf import settings

logger = logging.getLogger(__name__)

ADMIN_TOKEN_TYPE = 'admin'
ADMIN_TOKEN_ALGORITHM = 'HS256'


class AdminTokenError(Exception):
    """Raised when an admin token is missing, malformed, expired or forged."""


def _secret() -> str:
    secret = getattr(settings, 'ADMIN_TOKEN_SECRET', '')
    if not secret:
        raise AdminTokenError('Admin token signing is not configured')
    return secret


def issue_admin_token(
    *,
    user_id: UUID,
    admin_id: UUID | None,
    division_id: UUID | None,
    ttl_seconds: int | None = None,
    now: datetime | None = None,
) -> dict:
    """
    Issue a signed admin token.

    Returns:
        {"token": str, "expires_at": ISO timestamp}
    """
    issued_at = now or datetime.now(timezone.utc)
    ttl = ttl_seconds if ttl_seconds is not None else settings.ADMIN_TOKEN_TTL_SECONDS
    expires_at = issued_at + timedelta(seconds=ttl)

    payload = {
        'sub': str(user_id),
        'admin_id': str(admin_id) if admin_id else None,
        'division_id': str(division_id) if division_id else None,
        'type': ADMIN_TOKEN_TYPE,
        'iat': int(issued_at.timestamp()),
        'exp': int(expires_at.timestamp()),
    }
    token = jwt.encode(payload, _secret(), algorithm=ADMIN_TOKEN_ALGORITHM)
    return {'token': token, 'expires_at': expires_at.isoformat()}


def verify_admin_token(token: str) -> dict:
    """
    Verify an admin token and return its claims.

    Raises:
        AdminTokenError: with a client-safe message
    """
    if not token:
        raise AdminTokenError('Admin token required')

    try:
        payload = jwt.decode(
            token,
            _secret(),
            algorithms=[ADMIN_TOKEN_ALGORITHM],
            options={'require': ['exp', 'sub']},
        )
    except jwt.ExpiredSignatureError as err:
        logger.debug('Admin token has expired')
        raise AdminTokenError('Admin token expired') from err
    except jwt.InvalidTokenError as err:
        logger.debug(f'Admin token validation failed: {err}')
        raise AdminTokenError('Invalid admin token') from err

    if payload.get('type') != ADMIN_TOKEN_TYPE:
        raise AdminTokenError('Invalid admin token')

    return payload
