"""
Django Development Settings

Use these settings for local development.
"""
from .base import *  # noqa: F401, F403

# =============================================================================
# Debug Settings
# =============================================================================

DEBUG = True

ALLOWED_HOSTS = ['localhost', '127.0.0.1', '0.0.0.0']

# =============================================================================
# CORS Settings - Allow local Vite dev server
# =============================================================================

CORS_ALLOWED_ORIGINS = [
    'http://localhost:5173',
    'http://127.0.0.1:5173',
    'http://localhost:8080',
]

CORS_ALLOW_ALL_ORIGINS = False  # Keep strict even in dev

# =============================================================================
# Database - Allow local connection without SSL
# =============================================================================

DATABASES['default']['OPTIONS']['sslmode'] = config(  # noqa: F405
    'SUPABASE_DB_SSLMODE',
    default='prefer'
)

# =============================================================================
# Admin tokens - fall back to the Django secret locally
# =============================================================================

if not ADMIN_TOKEN_SECRET:  # noqa: F405
    ADMIN_TOKEN_SECRET = SECRET_KEY  # noqa: F405

# =============================================================================
# Logging - More verbose in development
# =============================================================================

LOGGING = LOGGING.copy()  # noqa: F405  # type: ignore[name-defined]
LOGGING['root']['level'] = 'DEBUG'  # type: ignore[index]
LOGGING['loggers']['django']['level'] = 'INFO'  # type: ignore[index]
