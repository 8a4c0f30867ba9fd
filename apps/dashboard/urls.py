"""
Dashboard API URLs

All routes are relative to /api/dashboard/
"""
from django.urls import path

from . import views

urlpatterns = [
    path('admin-stats', views.AdminStatsView.as_view(), name='dashboard_admin_stats'),
    path('super-admin-stats', views.SuperAdminStatsView.as_view(), name='dashboard_super_admin_stats'),
    path('admins/<str:admin_id>/toggle-status', views.ToggleAdminStatusView.as_view(), name='dashboard_toggle_admin_status'),
]
