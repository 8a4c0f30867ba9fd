"""
Django Base Settings for E-Life Admin Backend

This file contains all shared settings used across environments.
Environment-specific settings are in development.py and production.py.
"""
from pathlib import Path

from decouple import Csv, config

# Build paths inside the project like this: BASE_DIR / 'subdir'
BASE_DIR = Path(__file__).resolve().parent.parent.parent

# =============================================================================
# Core Settings
# =============================================================================

SECRET_KEY = config('DJANGO_SECRET_KEY', default='django-insecure-change-me-in-production')

DEBUG = config('DJANGO_DEBUG', default=True, cast=bool)

ALLOWED_HOSTS = config('ALLOWED_HOSTS', default='localhost,127.0.0.1', cast=Csv())

# =============================================================================
# Application Definition
# =============================================================================

INSTALLED_APPS = [
    'django.contrib.contenttypes',
    'django.contrib.auth',
    'django.contrib.staticfiles',

    'rest_framework',
    'corsheaders',

    # Local apps
    'apps.core',
    'apps.auth_api',       # Signed admin tokens
    'apps.dashboard',      # Admin / super admin statistics
    'apps.programs',       # Programs, modules, announcements, advertisements
    'apps.registrations',  # Registration answers and listings
    'apps.agents',         # Pennyekart agent hierarchy
    'apps.exports',        # Spreadsheet / PDF / print exports
    'apps.functions',      # Admin-token proxy endpoints
]

MIDDLEWARE = [
    'corsheaders.middleware.CorsMiddleware',
    'django.middleware.security.SecurityMiddleware',
    'django.middleware.common.CommonMiddleware',
]

ROOT_URLCONF = 'config.urls'

WSGI_APPLICATION = 'config.wsgi.application'

# =============================================================================
# Database
# Connects to existing Supabase PostgreSQL - no migrations run
# =============================================================================

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.postgresql',
        'NAME': config('SUPABASE_DB_NAME', default='postgres'),
        'USER': config('SUPABASE_DB_USER', default='postgres'),
        'PASSWORD': config('SUPABASE_DB_PASSWORD', default=''),
        'HOST': config('SUPABASE_DB_HOST', default='localhost'),
        'PORT': config('SUPABASE_DB_PORT', default='5432'),
        'OPTIONS': {
            'sslmode': config('SUPABASE_DB_SSLMODE', default='require'),
        },
    }
}

# =============================================================================
# Cache (stats snapshots)
# =============================================================================

CACHES = {
    'default': {
        'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
        'LOCATION': 'elife-stats',
    }
}

# =============================================================================
# Supabase Configuration
# =============================================================================

SUPABASE_URL = config('SUPABASE_URL', default='')
SUPABASE_JWT_SECRET = config('SUPABASE_JWT_SECRET', default='')

# =============================================================================
# Admin Tokens (X-Admin-Token header on proxy endpoints)
# =============================================================================

ADMIN_TOKEN_SECRET = config('ADMIN_TOKEN_SECRET', default='')
ADMIN_TOKEN_TTL_SECONDS = config('ADMIN_TOKEN_TTL_SECONDS', default=8 * 60 * 60, cast=int)

# =============================================================================
# Statistics
# =============================================================================

# Number of threads used to fan out independent stats queries (1 = inline)
STATS_FETCH_WORKERS = config('STATS_FETCH_WORKERS', default=4, cast=int)

# Seconds a computed stats snapshot stays cached
STATS_CACHE_TIMEOUT = config('STATS_CACHE_TIMEOUT', default=60, cast=int)

# =============================================================================
# REST Framework
# =============================================================================

REST_FRAMEWORK = {
    'DEFAULT_AUTHENTICATION_CLASSES': [
        'apps.core.authentication.SupabaseJWTAuthentication',
    ],
    'DEFAULT_PERMISSION_CLASSES': [
        'rest_framework.permissions.IsAuthenticated',
    ],
    'DEFAULT_RENDERER_CLASSES': [
        'rest_framework.renderers.JSONRenderer',
    ],
    'EXCEPTION_HANDLER': 'apps.core.exceptions.custom_exception_handler',
    'UNAUTHENTICATED_USER': None,
    # ?format= selects export file types, not DRF renderers
    'URL_FORMAT_OVERRIDE': None,
}

# =============================================================================
# CORS Configuration
# =============================================================================

CORS_ALLOWED_ORIGINS = config(
    'CORS_ALLOWED_ORIGINS',
    default='http://localhost:5173',
    cast=Csv()
)

CORS_ALLOW_CREDENTIALS = True

CORS_ALLOW_HEADERS = [
    'accept',
    'authorization',
    'apikey',
    'content-type',
    'origin',
    'x-client-info',
    'x-admin-token',
]

# =============================================================================
# Internationalization
# =============================================================================

LANGUAGE_CODE = 'en-in'
TIME_ZONE = 'Asia/Kolkata'
USE_I18N = False
USE_TZ = True

# =============================================================================
# Static files
# =============================================================================

STATIC_URL = '/static/'

# =============================================================================
# Logging
# =============================================================================

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'verbose': {
            'format': '{levelname} {asctime} {module} {message}',
            'style': '{',
        },
        'simple': {
            'format': '{levelname} {message}',
            'style': '{',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'verbose',
        },
    },
    'root': {
        'handlers': ['console'],
        'level': 'INFO',
    },
    'loggers': {
        'django': {
            'handlers': ['console'],
            'level': config('DJANGO_LOG_LEVEL', default='INFO'),
            'propagate': False,
        },
        'apps': {
            'handlers': ['console'],
            'level': 'DEBUG',
            'propagate': False,
        },
    },
}

# =============================================================================
# Default primary key field type
# =============================================================================

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'
