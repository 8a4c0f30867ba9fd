"""
Authentication Tests

Supabase JWT verification and admin loading.
"""
import time
import uuid

import jwt
import pytest
from django.conf import settings
from django.test import RequestFactory
from rest_framework import exceptions

from apps.core.authentication import (
    AdminTokenAuthentication,
    SupabaseJWTAuthentication,
    load_admin,
)
from tests.conftest import admin_token_for, expired_admin_token_for
from tests.factories import AdminFactory, DivisionFactory, ProfileFactory, UserRoleFactory


def supabase_token(sub, **overrides):
    payload = {
        'sub': str(sub),
        'email': 'admin@example.com',
        'aud': 'authenticated',
        'iss': f'{settings.SUPABASE_URL}/auth/v1',
        'exp': int(time.time()) + 3600,
    }
    payload.update(overrides)
    return jwt.encode(payload, settings.SUPABASE_JWT_SECRET, algorithm='HS256')


@pytest.mark.django_db
class TestLoadAdmin:

    def test_division_admin(self):
        extra = DivisionFactory()
        admin = AdminFactory(additional_division_ids=[str(extra.id)])

        user = load_admin(admin.user_id)

        assert user.admin_id == admin.id
        assert user.division_id == admin.division_id
        assert user.additional_division_ids == [extra.id]
        assert user.is_super_admin is False
        assert user.email

    def test_super_admin_without_admin_row(self):
        profile = ProfileFactory()
        UserRoleFactory(user_id=profile.id, super_admin=True)

        user = load_admin(profile.id)

        assert user.is_super_admin is True
        assert user.admin_id is None
        assert user.email == profile.email

    def test_inactive_admin_is_rejected(self):
        admin = AdminFactory(inactive=True)

        assert load_admin(admin.user_id) is None

    def test_unknown_user(self):
        assert load_admin(uuid.uuid4()) is None

    def test_invalid_additional_division_ids_are_skipped(self):
        admin = AdminFactory(additional_division_ids=['not-a-uuid'])

        assert load_admin(admin.user_id).additional_division_ids == []


@pytest.mark.django_db
class TestSupabaseJWTAuthentication:

    def setup_method(self):
        self.factory = RequestFactory()
        self.auth = SupabaseJWTAuthentication()

    def test_valid_token(self):
        admin = AdminFactory()
        request = self.factory.get('/', HTTP_AUTHORIZATION=f'Bearer {supabase_token(admin.user_id)}')

        user, token = self.auth.authenticate(request)

        assert user.admin_id == admin.id
        assert user.email == 'admin@example.com'

    def test_no_header_returns_none(self):
        assert self.auth.authenticate(self.factory.get('/')) is None

    def test_expired_token(self):
        admin = AdminFactory()
        token = supabase_token(admin.user_id, exp=int(time.time()) - 10)
        request = self.factory.get('/', HTTP_AUTHORIZATION=f'Bearer {token}')

        with pytest.raises(exceptions.AuthenticationFailed):
            self.auth.authenticate(request)

    def test_wrong_audience(self):
        admin = AdminFactory()
        token = supabase_token(admin.user_id, aud='anon')
        request = self.factory.get('/', HTTP_AUTHORIZATION=f'Bearer {token}')

        with pytest.raises(exceptions.AuthenticationFailed):
            self.auth.authenticate(request)

    def test_non_admin_user(self):
        request = self.factory.get('/', HTTP_AUTHORIZATION=f'Bearer {supabase_token(uuid.uuid4())}')

        with pytest.raises(exceptions.AuthenticationFailed, match='Admin access required'):
            self.auth.authenticate(request)


@pytest.mark.django_db
class TestAdminTokenAuthentication:

    def setup_method(self):
        self.factory = RequestFactory()
        self.auth = AdminTokenAuthentication()

    def test_valid_token(self):
        admin = AdminFactory()
        request = self.factory.get('/', HTTP_X_ADMIN_TOKEN=admin_token_for(admin))

        user, _ = self.auth.authenticate(request)

        assert user.admin_id == admin.id

    def test_missing_header(self):
        with pytest.raises(exceptions.AuthenticationFailed, match='Admin token required'):
            self.auth.authenticate(self.factory.get('/'))

    def test_expired_token(self):
        admin = AdminFactory()
        request = self.factory.get('/', HTTP_X_ADMIN_TOKEN=expired_admin_token_for(admin))

        with pytest.raises(exceptions.AuthenticationFailed, match='Admin token expired'):
            self.auth.authenticate(request)

    def test_deactivated_admin(self):
        admin = AdminFactory()
        token = admin_token_for(admin)
        admin.is_active = False
        admin.save()

        with pytest.raises(exceptions.AuthenticationFailed):
            self.auth.authenticate(self.factory.get('/', HTTP_X_ADMIN_TOKEN=token))
