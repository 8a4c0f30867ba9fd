"""
Public Programs API URLs

All routes are relative to /api/
"""
from django.urls import path

from . import views

urlpatterns = [
    path('divisions', views.PublicDivisionsView.as_view(), name='public_divisions'),
    path('programs', views.PublicProgramsView.as_view(), name='public_programs'),
]
