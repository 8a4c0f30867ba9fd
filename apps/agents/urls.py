"""
Pennyekart Agents API URLs

All routes are relative to /api/pennyekart/
"""
from django.urls import path

from . import views

urlpatterns = [
    path('agents', views.AgentsListView.as_view(), name='pennyekart_agents'),
    path('agents/hierarchy', views.AgentHierarchyView.as_view(), name='pennyekart_agents_hierarchy'),
    path('agents/export', views.AgentExportView.as_view(), name='pennyekart_agents_export'),
    path('agents/<str:agent_id>', views.AgentDetailView.as_view(), name='pennyekart_agent_detail'),
]
