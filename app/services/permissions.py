# app/services/permissions.py
"""
Static role → permission table. Nothing here is persisted.

  daily_admin  : base
  weekly_admin : base + history
  yearly_admin : base + statistics + history
"""

from app.models.user import UserRole

BASE_PERMISSIONS = {
    "canCreateEntries": True,
    "canEditEntries": True,
    "canViewEntries": True,
}

HISTORY_PERMISSIONS = {
    "canViewHistory": True,
    "canDeleteEntries": True,
}

STATISTICS_PERMISSIONS = {
    "canViewStatistics": True,
    "canManualCleanup": True,
}

ALL_PERMISSIONS = tuple({**BASE_PERMISSIONS, **HISTORY_PERMISSIONS, **STATISTICS_PERMISSIONS})


def get_permissions(role: UserRole) -> dict[str, bool]:
    """Return every permission flag for a role; flags not granted are False."""
    match UserRole(role):
        case UserRole.DAILY_ADMIN:
            granted = {**BASE_PERMISSIONS}
        case UserRole.WEEKLY_ADMIN:
            granted = {**BASE_PERMISSIONS, **HISTORY_PERMISSIONS}
        case UserRole.YEARLY_ADMIN:
            granted = {**BASE_PERMISSIONS, **STATISTICS_PERMISSIONS, **HISTORY_PERMISSIONS}
    return {name: granted.get(name, False) for name in ALL_PERMISSIONS}


def has_permission(role: UserRole, permission: str) -> bool:
    return get_permissions(role).get(permission, False)
