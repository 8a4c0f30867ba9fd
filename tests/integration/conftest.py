"""
Integration Test Fixtures

Provides real database fixtures using Factory Boy.
These fixtures create actual database records for true integration testing.
"""
import pytest

from tests.conftest import admin_token_for, admin_user_for, client_for
from tests.factories import AdminFactory, DivisionFactory, PanchayathFactory

# =============================================================================
# Division & Admin Fixtures
# =============================================================================


@pytest.fixture
def division(db):
    """The division the test admin manages."""
    return DivisionFactory(name='Agriculture')


@pytest.fixture
def other_division(db):
    """A division the test admin cannot see."""
    return DivisionFactory(name='Business')


@pytest.fixture
def admin(division):
    """An active admin row for the division."""
    return AdminFactory(division=division)


@pytest.fixture
def admin_user(admin):
    return admin_user_for(admin)


@pytest.fixture
def admin_client(admin_user):
    """API client authenticated as the division admin."""
    return client_for(admin_user)


@pytest.fixture
def admin_token(admin):
    """Signed X-Admin-Token for the division admin."""
    return admin_token_for(admin)


# =============================================================================
# Location Fixtures
# =============================================================================


@pytest.fixture
def kodur(db):
    return PanchayathFactory(name='Kodur')


@pytest.fixture
def ponmala(db):
    return PanchayathFactory(name='Ponmala')
