"""
Integration Tests for the Programs API

Tests:
1. Public divisions / programs listing
2. Admin program management with division scoping
3. Modules, announcements and advertisements
4. Registration listing and export
"""
import io
import uuid

import pytest
from openpyxl import load_workbook
from rest_framework import status

from apps.core.models import ProgramAnnouncement, ProgramModule
from tests.factories import (
    DivisionFactory,
    ProgramAnnouncementFactory,
    ProgramFactory,
    ProgramFormQuestionFactory,
    ProgramModuleFactory,
    ProgramRegistrationFactory,
)


@pytest.fixture
def program(division):
    return ProgramFactory(division=division, name='Onam Fest 2024!')


@pytest.fixture
def foreign_program(other_division):
    return ProgramFactory(division=other_division)


@pytest.mark.django_db
class TestPublicAPI:

    def test_divisions_need_no_auth(self, api_client):
        DivisionFactory(name='Agriculture')
        DivisionFactory(name='Closed', is_active=False)

        response = api_client.get('/api/divisions')

        assert response.status_code == status.HTTP_200_OK
        assert [d['name'] for d in response.json()] == ['Agriculture']

    def test_programs_filtered_by_division(self, api_client, program, foreign_program):
        ProgramModuleFactory(program=program, published=True)
        ProgramModuleFactory(program=foreign_program, published=True)

        response = api_client.get('/api/programs', {'division': 'AGRICULTURE'})

        assert response.status_code == status.HTTP_200_OK
        assert [p['id'] for p in response.json()] == [str(program.id)]

    def test_unpublished_programs_hidden(self, api_client, program):
        ProgramModuleFactory(program=program)

        assert api_client.get('/api/programs').json() == []

    def test_invalid_bearer_token_is_ignored(self, api_client, program):
        ProgramModuleFactory(program=program, published=True)
        api_client.credentials(HTTP_AUTHORIZATION='Bearer garbage')

        response = api_client.get('/api/programs')

        assert response.status_code == status.HTTP_200_OK


@pytest.mark.django_db
class TestAdminProgramsAPI:

    def test_list_is_scoped(self, admin_client, program, foreign_program):
        ProgramRegistrationFactory(program=program)

        response = admin_client.get('/api/admin/programs')

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert [p['id'] for p in data] == [str(program.id)]
        assert data[0]['registration_count'] == 1

    def test_super_admin_sees_everything(self, super_admin_client, program, foreign_program):
        assert len(super_admin_client.get('/api/admin/programs').json()) == 2

    def test_detail(self, admin_client, program):
        ProgramAnnouncementFactory(program=program)

        response = admin_client.get(f'/api/admin/programs/{program.id}')

        assert response.status_code == status.HTTP_200_OK
        assert len(response.json()['announcements']) == 1

    def test_detail_other_division(self, admin_client, foreign_program):
        response = admin_client.get(f'/api/admin/programs/{foreign_program.id}')

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.json()['error'] == 'PermissionDeniedError'

    def test_detail_missing(self, admin_client):
        response = admin_client.get(f'/api/admin/programs/{uuid.uuid4()}')

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_patch(self, admin_client, program):
        response = admin_client.patch(
            f'/api/admin/programs/{program.id}',
            {'name': ' Renamed ', 'end_date': '2025-03-01'},
            format='json',
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json()['name'] == 'Renamed'
        assert response.json()['end_date'] == '2025-03-01'

    def test_patch_blank_name(self, admin_client, program):
        response = admin_client.patch(f'/api/admin/programs/{program.id}', {'name': ''}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()['message'] == 'Program name is required'

    def test_toggle_active(self, admin_client, program):
        response = admin_client.post(f'/api/admin/programs/{program.id}/toggle-active')

        assert response.json() == {'id': str(program.id), 'is_active': False}

    def test_delete(self, admin_client, program):
        response = admin_client.delete(f'/api/admin/programs/{program.id}')

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {'success': True}


@pytest.mark.django_db
class TestModulesAPI:

    def test_enable_and_disable(self, admin_client, program):
        url = f'/api/admin/programs/{program.id}/modules/announcement'

        created = admin_client.post(url)
        assert created.status_code == status.HTTP_201_CREATED
        assert created.json()['is_published'] is False

        assert admin_client.delete(url).status_code == status.HTTP_200_OK
        assert not ProgramModule.objects.filter(program=program).exists()

    def test_invalid_module_type(self, admin_client, program):
        response = admin_client.post(f'/api/admin/programs/{program.id}/modules/gallery')

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_toggle_publish(self, admin_client, program):
        module = ProgramModuleFactory(program=program)

        response = admin_client.post(f'/api/admin/modules/{module.id}/toggle-publish')

        assert response.json()['is_published'] is True


@pytest.mark.django_db
class TestContentAPI:

    def test_create_announcement(self, admin_client, program):
        response = admin_client.post(
            f'/api/admin/programs/{program.id}/announcements',
            {'title': 'Registrations open', 'description': ''},
            format='json',
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.json()['description'] is None

    def test_announcement_without_title(self, admin_client, program):
        response = admin_client.post(f'/api/admin/programs/{program.id}/announcements', {}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert not ProgramAnnouncement.objects.exists()

    def test_advertisement_without_title(self, admin_client, program):
        response = admin_client.post(
            f'/api/admin/programs/{program.id}/advertisements',
            {'poster_url': 'https://example.com/poster.png'},
            format='json',
        )

        assert response.status_code == status.HTTP_201_CREATED

    def test_list_update_toggle_delete(self, admin_client, program):
        announcement = ProgramAnnouncementFactory(program=program)

        listed = admin_client.get(f'/api/admin/programs/{program.id}/announcements').json()
        updated = admin_client.patch(
            f'/api/admin/announcements/{announcement.id}', {'title': 'Updated'}, format='json'
        ).json()
        toggled = admin_client.post(f'/api/admin/announcements/{announcement.id}/toggle-publish').json()
        deleted = admin_client.delete(f'/api/admin/announcements/{announcement.id}')

        assert [a['id'] for a in listed] == [str(announcement.id)]
        assert updated['title'] == 'Updated'
        assert toggled['is_published'] is True
        assert deleted.status_code == status.HTTP_200_OK
        assert not ProgramAnnouncement.objects.exists()


@pytest.mark.django_db
class TestRegistrationsAPI:

    @pytest.fixture
    def form(self, program):
        name_q = ProgramFormQuestionFactory(program=program, question_text='Name', sort_order=0)
        crops_q = ProgramFormQuestionFactory(program=program, question_text='Crops', sort_order=1)
        ward_q = ProgramFormQuestionFactory(program=program, question_text='Ward', sort_order=2)
        ProgramRegistrationFactory(program=program, answers={
            str(name_q.id): 'Asha',
            str(crops_q.id): ['Paddy', 'Banana'],
        })
        ProgramRegistrationFactory(program=program, answers={
            str(name_q.id): 'Ravi',
            str(ward_q.id): '4',
        })
        return [name_q, crops_q, ward_q]

    def test_list(self, admin_client, program, form):
        response = admin_client.get(f'/api/admin/programs/{program.id}/registrations')

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert [q['question_text'] for q in data['questions']] == ['Name', 'Crops', 'Ward']
        assert len(data['registrations']) == 2

    def test_export_xlsx(self, admin_client, program, form):
        response = admin_client.get(f'/api/admin/programs/{program.id}/registrations/export')

        assert response.status_code == status.HTTP_200_OK
        assert 'filename="Onam_Fest_2024__registrations_' in response['Content-Disposition']

        rows = list(load_workbook(io.BytesIO(response.content)).active.iter_rows(values_only=True))
        assert rows[0][2:] == ('Name', 'Crops', 'Ward')
        cells = {row[2]: tuple(value or '' for value in row[3:]) for row in rows[1:]}
        assert cells['Asha'] == ('Paddy, Banana', '')
        assert cells['Ravi'] == ('', '4')

    def test_export_html(self, admin_client, program, form):
        response = admin_client.get(
            f'/api/admin/programs/{program.id}/registrations/export', {'format': 'html'}
        )

        assert response['Content-Type'].startswith('text/html')
        assert b'Paddy, Banana' in response.content

    def test_export_other_division(self, admin_client, foreign_program):
        response = admin_client.get(f'/api/admin/programs/{foreign_program.id}/registrations/export')

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_export_invalid_format(self, admin_client, program):
        response = admin_client.get(
            f'/api/admin/programs/{program.id}/registrations/export', {'format': 'docx'}
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
