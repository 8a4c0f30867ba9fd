"""
Integration Tests for the Admin-token Proxy API

Tests:
1. X-Admin-Token enforcement (missing, forged, expired, inactive admin)
2. admin-locations resource/action dispatch
3. admin-registrations with the panchayath filter
"""
import uuid

import jwt
import pytest
from django.conf import settings
from rest_framework import status

from apps.core.models import Cluster, Panchayath
from tests.conftest import admin_token_for, expired_admin_token_for
from tests.factories import AdminFactory, ClusterFactory, ProgramFactory, ProgramRegistrationFactory

LOCATIONS_URL = '/api/functions/admin-locations'
REGISTRATIONS_URL = '/api/functions/admin-registrations'


@pytest.fixture
def token_client(api_client, admin_token):
    api_client.credentials(HTTP_X_ADMIN_TOKEN=admin_token)
    return api_client


@pytest.mark.django_db
class TestAdminTokenEnforcement:

    def test_missing_token(self, api_client):
        response = api_client.get(LOCATIONS_URL)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json() == {'error': 'Admin token required'}

    def test_forged_token(self, api_client, admin):
        forged = jwt.encode(
            {'sub': str(admin.user_id), 'type': 'admin', 'exp': 9999999999},
            'not-the-secret',
            algorithm='HS256',
        )
        api_client.credentials(HTTP_X_ADMIN_TOKEN=forged)

        response = api_client.get(LOCATIONS_URL)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json() == {'error': 'Invalid admin token'}

    def test_unsigned_token(self, api_client, admin):
        unsigned = jwt.encode(
            {'sub': str(admin.user_id), 'type': 'admin', 'exp': 9999999999},
            key=None,
            algorithm='none',
        )
        api_client.credentials(HTTP_X_ADMIN_TOKEN=unsigned)

        assert api_client.get(LOCATIONS_URL).status_code == status.HTTP_401_UNAUTHORIZED

    def test_expired_token(self, api_client, admin):
        api_client.credentials(HTTP_X_ADMIN_TOKEN=expired_admin_token_for(admin))

        response = api_client.get(LOCATIONS_URL)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json() == {'error': 'Admin token expired'}

    def test_inactive_admin(self, api_client):
        admin = AdminFactory(inactive=True)
        api_client.credentials(HTTP_X_ADMIN_TOKEN=admin_token_for(admin))

        assert api_client.get(LOCATIONS_URL).status_code == status.HTTP_401_UNAUTHORIZED

    def test_bearer_session_is_not_enough(self, api_client, admin):
        token = jwt.encode(
            {'sub': str(admin.user_id), 'aud': 'authenticated', 'exp': 9999999999},
            settings.SUPABASE_JWT_SECRET,
            algorithm='HS256',
        )
        api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {token}')

        assert api_client.get(LOCATIONS_URL).status_code == status.HTTP_401_UNAUTHORIZED


@pytest.mark.django_db
class TestAdminLocationsAPI:

    def test_default_lists_panchayaths(self, token_client, kodur, ponmala):
        response = token_client.get(LOCATIONS_URL)

        assert response.status_code == status.HTTP_200_OK
        assert [p['name'] for p in response.json()['data']] == ['Kodur', 'Ponmala']

    def test_list_clusters(self, token_client, kodur):
        ClusterFactory(name='North', panchayath=kodur)

        response = token_client.get(LOCATIONS_URL, {'resource': 'clusters'})

        assert response.json()['data'][0]['panchayath'] == {'name': 'Kodur'}

    def test_create_panchayath(self, token_client):
        response = token_client.post(
            f'{LOCATIONS_URL}?resource=panchayaths&action=create', {'name': 'Vengara'}, format='json'
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json()['data']['name'] == 'Vengara'
        assert Panchayath.objects.filter(name='Vengara').exists()

    def test_update_cluster(self, token_client, kodur):
        cluster = ClusterFactory(name='North')

        response = token_client.patch(
            f'{LOCATIONS_URL}?resource=clusters&action=update',
            {'id': str(cluster.id), 'name': 'North East', 'panchayath_id': str(kodur.id)},
            format='json',
        )

        assert response.status_code == status.HTTP_200_OK
        cluster = Cluster.objects.get(id=cluster.id)
        assert cluster.name == 'North East'
        assert cluster.panchayath_id == kodur.id

    def test_update_missing_row(self, token_client):
        response = token_client.patch(
            f'{LOCATIONS_URL}?resource=panchayaths&action=update',
            {'id': str(uuid.uuid4()), 'name': 'X'},
            format='json',
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json() == {'error': 'Panchayath not found'}

    @pytest.mark.parametrize('method, query', [
        ('get', '?resource=wards'),
        ('post', '?resource=panchayaths&action=update'),
        ('patch', '?resource=clusters&action=create'),
        ('post', '?resource=panchayaths&action=delete'),
    ])
    def test_invalid_resource_or_action(self, token_client, method, query):
        response = getattr(token_client, method)(f'{LOCATIONS_URL}{query}', {}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json() == {'error': 'Invalid resource or action'}

    def test_unexpected_error(self, token_client, mocker):
        mocker.patch.dict(
            'apps.functions.services.LOCATION_HANDLERS',
            {('panchayaths', 'list'): mocker.Mock(side_effect=RuntimeError('db down'))},
        )

        response = token_client.get(LOCATIONS_URL)

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.json() == {'error': 'db down'}


@pytest.mark.django_db
class TestAdminRegistrationsAPI:

    @pytest.fixture
    def program(self, division):
        return ProgramFactory(division=division)

    def test_lists_program_registrations(self, token_client, program):
        ProgramRegistrationFactory.create_batch(2, program=program)
        ProgramRegistrationFactory()

        response = token_client.get(REGISTRATIONS_URL, {'program_id': str(program.id)})

        assert response.status_code == status.HTTP_200_OK
        assert len(response.json()['registrations']) == 2

    def test_panchayath_filter(self, token_client, program, kodur):
        ProgramRegistrationFactory(program=program, answers={'_fixed': {'name': 'A', 'panchayath_id': str(kodur.id)}})
        ProgramRegistrationFactory(program=program, answers={'_fixed': {'name': 'B', 'panchayath_id': str(uuid.uuid4())}})
        ProgramRegistrationFactory(program=program, answers={})

        response = token_client.get(REGISTRATIONS_URL, {'program_id': str(program.id), 'panchayath_id': str(kodur.id)})

        registrations = response.json()['registrations']
        assert len(registrations) == 1
        assert registrations[0]['answers']['_fixed']['name'] == 'A'

    def test_program_id_required(self, token_client):
        response = token_client.get(REGISTRATIONS_URL)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json() == {'error': 'program_id is required'}

    def test_other_division_program(self, token_client, other_division):
        program = ProgramFactory(division=other_division)

        response = token_client.get(REGISTRATIONS_URL, {'program_id': str(program.id)})

        assert response.status_code == status.HTTP_403_FORBIDDEN
