"""
Utility functions for E-Life Admin Backend

Common helpers used across services and views.
"""
import re
from datetime import date, datetime

from django.utils import timezone


def clean_optional(value) -> str | None:
    """Trim a string; blank values become None."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def sanitize_filename(name: str, max_length: int = 50) -> str:
    """
    Replace every non-alphanumeric character with '_' and truncate.

    >>> sanitize_filename('Onam Fest 2024!')
    'Onam_Fest_2024_'
    """
    return re.sub(r'[^a-zA-Z0-9]', '_', name or '')[:max_length]


def date_stamp(today: date | None = None) -> str:
    """ISO date stamp used in export filenames."""
    return (today or timezone.localdate()).isoformat()


def format_datetime(value: datetime | str | None) -> str:
    """Medium date + short time, e.g. '5 Jan 2025, 10:30 AM'."""
    if not value:
        return ''
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.replace('Z', '+00:00'))
        except ValueError:
            return value
    if timezone.is_aware(value):
        value = timezone.localtime(value)
    return f"{value.day} {value:%b %Y, %I:%M %p}"


def format_date(value: datetime | date | str | None) -> str:
    """Medium date, e.g. '5 Jan 2025'."""
    if not value:
        return ''
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.replace('Z', '+00:00'))
        except ValueError:
            return value
    if isinstance(value, datetime) and timezone.is_aware(value):
        value = timezone.localtime(value)
    return f"{value.day} {value:%b %Y}"
