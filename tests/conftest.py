"""
Pytest Configuration for E-Life Admin Backend Tests

Key Features:
- Enables managed=True for unmanaged models during tests
- Provides fixtures for authenticated admins and API clients
- Sets up factory_boy for model factories
"""
import uuid
from datetime import timedelta

import pytest
from django.apps import apps
from django.core.cache import cache
from django.utils import timezone
from rest_framework.test import APIClient

from apps.core.admin_tokens import issue_admin_token
from apps.core.authentication import AuthenticatedAdmin


# =============================================================================
# Database Setup - Enable managed=True for unmanaged models
# =============================================================================

@pytest.fixture(scope='session')
def django_db_modify_db_settings():
    """
    Enable managed=True for all models before the test database is created.
    This allows Django to create tables for models that normally
    point to existing Supabase tables (managed=False).
    """
    for model in apps.get_models():
        if not model._meta.managed:
            model._meta.managed = True


@pytest.fixture(autouse=True)
def clear_stats_cache():
    """Stats snapshots live in the locmem cache; start every test empty."""
    cache.clear()
    yield
    cache.clear()


# =============================================================================
# AuthenticatedAdmin helpers
# =============================================================================

def make_admin_user(
    *,
    user_id: uuid.UUID | None = None,
    admin_id: uuid.UUID | None = None,
    division_id: uuid.UUID | None = None,
    additional_division_ids: list | None = None,
    access_all_divisions: bool = False,
    is_super_admin: bool = False,
    email: str = 'admin@example.com',
) -> AuthenticatedAdmin:
    """Build an AuthenticatedAdmin without touching the database."""
    return AuthenticatedAdmin(
        id=user_id or uuid.uuid4(),
        email=email,
        admin_id=admin_id if admin_id or is_super_admin else uuid.uuid4(),
        division_id=division_id,
        additional_division_ids=list(additional_division_ids or []),
        access_all_divisions=access_all_divisions,
        is_super_admin=is_super_admin,
    )


@pytest.fixture
def super_admin_user():
    """A super admin (unrestricted scope)."""
    return make_admin_user(is_super_admin=True, email='super@example.com')


def admin_user_for(admin) -> AuthenticatedAdmin:
    """AuthenticatedAdmin matching an Admin row."""
    return make_admin_user(
        user_id=admin.user_id,
        admin_id=admin.id,
        division_id=admin.division_id,
        additional_division_ids=[uuid.UUID(str(d)) for d in admin.additional_division_ids],
        access_all_divisions=admin.access_all_divisions,
    )


# =============================================================================
# API Client Fixtures
# =============================================================================

@pytest.fixture
def api_client():
    """Basic API client without authentication."""
    return APIClient()


@pytest.fixture
def super_admin_client(super_admin_user):
    """API client authenticated as a super admin."""
    client = APIClient()
    client.force_authenticate(user=super_admin_user)
    return client


def client_for(user: AuthenticatedAdmin) -> APIClient:
    client = APIClient()
    client.force_authenticate(user=user)
    return client


def admin_token_for(admin, ttl_seconds: int | None = None, now=None) -> str:
    """Signed X-Admin-Token value for an Admin row."""
    return issue_admin_token(
        user_id=admin.user_id,
        admin_id=admin.id,
        division_id=admin.division_id,
        ttl_seconds=ttl_seconds,
        now=now,
    )['token']


def expired_admin_token_for(admin) -> str:
    return admin_token_for(admin, ttl_seconds=60, now=timezone.now() - timedelta(hours=2))
