"""
Factory Boy Factories for E-Life Admin Models

Import all factories here for easy access in tests.
"""
from tests.factories.agents import PennyekartAgentFactory
from tests.factories.core import (
    AdminFactory,
    ClusterFactory,
    DivisionFactory,
    MemberFactory,
    PanchayathFactory,
    ProfileFactory,
    UserRoleFactory,
)
from tests.factories.programs import (
    ProgramAdvertisementFactory,
    ProgramAnnouncementFactory,
    ProgramFactory,
    ProgramFormQuestionFactory,
    ProgramModuleFactory,
    ProgramRegistrationFactory,
)

__all__ = [
    # Core
    'DivisionFactory',
    'PanchayathFactory',
    'ClusterFactory',
    'ProfileFactory',
    'UserRoleFactory',
    'AdminFactory',
    'MemberFactory',
    # Programs
    'ProgramFactory',
    'ProgramModuleFactory',
    'ProgramFormQuestionFactory',
    'ProgramRegistrationFactory',
    'ProgramAnnouncementFactory',
    'ProgramAdvertisementFactory',
    # Agents
    'PennyekartAgentFactory',
]
