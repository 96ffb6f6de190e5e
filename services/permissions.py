"""
Role → permission table for the unit and currency endpoints.

Roles: SUPER_ADMIN, ADMIN, MANAGER, AGENT, USER.
"""

from types import MappingProxyType
from typing import Mapping, Optional

ALL_ROLES = frozenset({"SUPER_ADMIN", "ADMIN", "MANAGER", "AGENT", "USER"})
UNIT_EDITORS = frozenset({"SUPER_ADMIN", "ADMIN", "MANAGER"})

PERMISSIONS: Mapping[str, frozenset[str]] = MappingProxyType({
    "units.view": ALL_ROLES,
    "units.bulk_update": UNIT_EDITORS,
    "units.csv_import": UNIT_EDITORS,
    "units.delete": frozenset({"SUPER_ADMIN", "ADMIN"}),
    "currencies.view": ALL_ROLES,
})


def has_permission(role: Optional[str], permission: str) -> bool:
    """True if the role is granted the permission. Unknown permissions deny."""
    if not role:
        return False
    return role in PERMISSIONS.get(permission, frozenset())
