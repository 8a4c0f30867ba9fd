"""
Explicit request context passed to every aggregation and query call.

Services never read auth state from the request or from module globals;
views build an AdminContext once and hand it down.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING
from uuid import UUID

if TYPE_CHECKING:
    from .authentication import AuthenticatedAdmin


@dataclass(frozen=True)
class AdminContext:
    """
    Division scope of the caller.

    accessible_division_ids is only meaningful when unrestricted is False;
    an unrestricted context sees every division.
    """
    user_id: UUID | None
    role: str
    admin_id: UUID | None = None
    division_id: UUID | None = None
    accessible_division_ids: frozenset[UUID] = field(default_factory=frozenset)
    unrestricted: bool = False
    token: str | None = None

    @classmethod
    def from_admin(cls, admin: AuthenticatedAdmin, token: str | None = None) -> AdminContext:
        unrestricted = admin.is_super_admin or admin.access_all_divisions
        division_ids: set[UUID] = set()
        if not unrestricted and admin.division_id:
            division_ids.add(admin.division_id)
            division_ids.update(admin.additional_division_ids)

        return cls(
            user_id=admin.id,
            role=admin.role,
            admin_id=admin.admin_id,
            division_id=admin.division_id,
            accessible_division_ids=frozenset(division_ids),
            unrestricted=unrestricted,
            token=token,
        )

    @classmethod
    def unrestricted_context(cls) -> AdminContext:
        return cls(user_id=None, role='super_admin', unrestricted=True)

    @property
    def is_super_admin(self) -> bool:
        return self.role == 'super_admin'

    @property
    def has_scope(self) -> bool:
        """False for an admin without any division (sees nothing)."""
        return self.unrestricted or bool(self.accessible_division_ids)

    @property
    def division_filter(self) -> list[UUID] | None:
        """Division ids to filter on, or None for no filter."""
        if self.unrestricted:
            return None
        return sorted(self.accessible_division_ids, key=str)

    def can_access_division(self, division_id: UUID | None) -> bool:
        if self.unrestricted:
            return True
        if division_id is None:
            return False
        return UUID(str(division_id)) in self.accessible_division_ids

    @property
    def scope_key(self) -> str:
        """Stable cache key for this scope."""
        if self.unrestricted:
            return 'all'
        return ','.join(str(d) for d in self.division_filter or []) or 'none'
