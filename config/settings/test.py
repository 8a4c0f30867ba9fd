"""
Django Test Settings for E-Life Admin Backend

Uses SQLite so the suite runs without a Supabase instance.
The unmanaged models are switched to managed in tests/conftest.py so that
Django creates their tables for the test database.
"""
from .base import *  # noqa: F401, F403

# =============================================================================
# Debug Mode for Tests
# =============================================================================

DEBUG = False

SECRET_KEY = 'test-secret-key'

# =============================================================================
# Database
# =============================================================================

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': BASE_DIR / 'test.sqlite3',  # noqa: F405
        'TEST': {
            'NAME': ':memory:',
        },
    }
}

# =============================================================================
# Speed Optimizations for Tests
# =============================================================================

PASSWORD_HASHERS = [
    'django.contrib.auth.hashers.MD5PasswordHasher',
]

# Test transactions are not visible from worker threads
STATS_FETCH_WORKERS = 1

CACHES = {
    'default': {
        'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
        'LOCATION': 'elife-tests',
    }
}

# Disable logging during tests
LOGGING = {
    'version': 1,
    'disable_existing_loggers': True,
    'handlers': {
        'null': {
            'class': 'logging.NullHandler',
        },
    },
    'root': {
        'handlers': ['null'],
        'level': 'CRITICAL',
    },
}

# =============================================================================
# Supabase / Admin Token Mock Configuration
# =============================================================================

SUPABASE_URL = 'http://localhost:54321'
SUPABASE_JWT_SECRET = 'test-jwt-secret-key-for-testing-purposes-only'

ADMIN_TOKEN_SECRET = 'test-admin-token-secret-for-testing-only'
ADMIN_TOKEN_TTL_SECONDS = 3600

# =============================================================================
# CORS - Allow all for tests
# =============================================================================

CORS_ALLOW_ALL_ORIGINS = True
