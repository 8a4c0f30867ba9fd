"""
Django Production Settings

Use these settings for production deployment.
"""
from .base import *  # noqa: F401, F403

# =============================================================================
# Security Settings
# =============================================================================

DEBUG = False

ALLOWED_HOSTS = config('ALLOWED_HOSTS', cast=Csv())  # noqa: F405

SECURE_CONTENT_TYPE_NOSNIFF = True
X_FRAME_OPTIONS = 'DENY'

# Behind the platform's TLS-terminating proxy
SECURE_SSL_REDIRECT = config('SECURE_SSL_REDIRECT', default=True, cast=bool)  # noqa: F405
SECURE_PROXY_SSL_HEADER = ('HTTP_X_FORWARDED_PROTO', 'https')

SECURE_HSTS_SECONDS = 31536000
SECURE_HSTS_INCLUDE_SUBDOMAINS = True

# =============================================================================
# CORS - only the deployed admin dashboard
# =============================================================================

CORS_ALLOWED_ORIGINS = config('CORS_ALLOWED_ORIGINS', cast=Csv())  # noqa: F405
CORS_ALLOW_ALL_ORIGINS = False

# =============================================================================
# Database - Supabase requires SSL
# =============================================================================

DATABASES['default']['OPTIONS']['sslmode'] = 'require'  # noqa: F405
DATABASES['default']['CONN_MAX_AGE'] = config('DB_CONN_MAX_AGE', default=60, cast=int)  # noqa: F405

# =============================================================================
# Secrets - no defaults in production
# =============================================================================

SUPABASE_JWT_SECRET = config('SUPABASE_JWT_SECRET')  # noqa: F405
ADMIN_TOKEN_SECRET = config('ADMIN_TOKEN_SECRET')  # noqa: F405

# =============================================================================
# Logging - Less verbose in production
# =============================================================================

LOGGING = LOGGING.copy()  # noqa: F405  # type: ignore[name-defined]
LOGGING['root']['level'] = 'INFO'  # type: ignore[index]
LOGGING['loggers']['django']['level'] = 'WARNING'  # type: ignore[index]
LOGGING['loggers']['apps']['level'] = config('APP_LOG_LEVEL', default='INFO')  # type: ignore[index]  # noqa: F405
