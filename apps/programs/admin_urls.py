"""
Admin Programs API URLs

All routes are relative to /api/admin/
"""
from django.urls import path

from apps.exports.views import RegistrationExportView
from . import views

urlpatterns = [
    path('programs', views.AdminProgramsListView.as_view(), name='admin_programs'),
    path('programs/<str:program_id>', views.AdminProgramDetailView.as_view(), name='admin_program_detail'),
    path('programs/<str:program_id>/toggle-active', views.AdminProgramToggleActiveView.as_view(), name='admin_program_toggle_active'),
    path('programs/<str:program_id>/modules/<str:module_type>', views.AdminProgramModuleView.as_view(), name='admin_program_module'),
    path('programs/<str:program_id>/registrations', views.AdminProgramRegistrationsView.as_view(), name='admin_program_registrations'),
    path('programs/<str:program_id>/registrations/export', RegistrationExportView.as_view(), name='admin_program_registrations_export'),
    path(
        'programs/<str:program_id>/announcements',
        views.ProgramContentListView.as_view(kind='announcement'),
        name='admin_program_announcements',
    ),
    path(
        'programs/<str:program_id>/advertisements',
        views.ProgramContentListView.as_view(kind='advertisement'),
        name='admin_program_advertisements',
    ),
    path('modules/<str:module_id>/toggle-publish', views.AdminModuleTogglePublishView.as_view(), name='admin_module_toggle_publish'),
    path('announcements/<str:item_id>', views.ProgramContentDetailView.as_view(kind='announcement'), name='admin_announcement_detail'),
    path(
        'announcements/<str:item_id>/toggle-publish',
        views.ProgramContentTogglePublishView.as_view(kind='announcement'),
        name='admin_announcement_toggle_publish',
    ),
    path('advertisements/<str:item_id>', views.ProgramContentDetailView.as_view(kind='advertisement'), name='admin_advertisement_detail'),
    path(
        'advertisements/<str:item_id>/toggle-publish',
        views.ProgramContentTogglePublishView.as_view(kind='advertisement'),
        name='admin_advertisement_toggle_publish',
    ),
]
