"""
Authentication API URLs

All routes are relative to /api/auth/
"""
from django.urls import path

from . import views

urlpatterns = [
    path('admin-token', views.AdminTokenView.as_view(), name='auth_admin_token'),
    path('session', views.SessionView.as_view(), name='auth_session'),
]
