"""
Core Constants

Centralized configuration values for the application.
"""

# Program module types (at most one row per program and type)
MODULE_TYPES = ['announcement', 'registration', 'advertisement']

MODULE_TYPE_CHOICES = [
    ('announcement', 'Announcement'),
    ('registration', 'Registration Form'),
    ('advertisement', 'Advertisement'),
]

# Pennyekart agent roles, top of the reporting chain first
AGENT_ROLES = ['team_leader', 'coordinator', 'group_leader', 'pro']

AGENT_ROLE_CHOICES = [
    ('team_leader', 'Team Leader'),
    ('coordinator', 'Coordinator'),
    ('group_leader', 'Group Leader'),
    ('pro', 'PRO'),
]

ROLE_LABELS = dict(AGENT_ROLE_CHOICES)

ROOT_AGENT_ROLE = 'team_leader'
LEAF_AGENT_ROLE = 'pro'

UNKNOWN_PANCHAYATH = 'Unknown Panchayath'

# Dashboard statistics
STATS = {
    "recent_registrations_limit": 10,
    "super_admin_recent_registrations": 5,
    "super_admin_recent_programs": 5,
    "recent_activity_limit": 10,
}

# Export settings
EXPORT = {
    "pdf_cell_max_length": 50,
    "filename_max_length": 50,
    "min_column_width": 15,
    "empty_cell": "",
    "display_placeholder": "-",
}

# Export formats
EXPORT_FORMATS = ["xlsx", "pdf", "html"]

# Resources exposed through the admin-locations proxy
LOCATION_RESOURCES = ["panchayaths", "clusters"]
