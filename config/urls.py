"""
URL Configuration for E-Life Admin Backend API

All routes are prefixed with /api/.
"""
from django.urls import include, path

from apps.core.views import health_check

urlpatterns = [
    # Health check endpoint (public)
    path('api/health', health_check, name='health_check'),

    # Authentication endpoints
    path('api/auth/', include('apps.auth_api.urls')),

    # Dashboard statistics
    path('api/dashboard/', include('apps.dashboard.urls')),

    # Public divisions and programs
    path('api/', include('apps.programs.urls')),

    # Program administration
    path('api/admin/', include('apps.programs.admin_urls')),

    # Pennyekart agents
    path('api/pennyekart/', include('apps.agents.urls')),

    # Admin-token proxy functions
    path('api/functions/', include('apps.functions.urls')),
]
