"""
Admin-token Proxy URLs

All routes are relative to /api/functions/
"""
from django.urls import path

from . import views

urlpatterns = [
    path('admin-locations', views.AdminLocationsView.as_view(), name='functions_admin_locations'),
    path('admin-registrations', views.AdminRegistrationsView.as_view(), name='functions_admin_registrations'),
]
