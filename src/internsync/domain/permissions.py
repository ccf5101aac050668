"""Role based permissions for privileged workspace actions."""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING, Final

from internsync.domain.model import Role

if TYPE_CHECKING:
    from internsync.domain.model import Profile


class Permission(StrEnum):
    # user management
    MANAGE_ALL_USERS = "MANAGE_ALL_USERS"
    CREATE_INTERN_ACCOUNT = "CREATE_INTERN_ACCOUNT"
    DELETE_USER = "DELETE_USER"
    # operational
    APPROVE_LOGS = "APPROVE_LOGS"
    ASSIGN_TASKS = "ASSIGN_TASKS"
    EVALUATE_STUDENT = "EVALUATE_STUDENT"
    MANAGE_RESOURCES = "MANAGE_RESOURCES"
    POST_ANNOUNCEMENT = "POST_ANNOUNCEMENT"
    SCHEDULE_MEETING = "SCHEDULE_MEETING"
    # system
    MANAGE_SYSTEM = "MANAGE_SYSTEM"
    VIEW_ADMIN_DASHBOARD = "VIEW_ADMIN_DASHBOARD"
    VIEW_SUPERVISOR_DASHBOARD = "VIEW_SUPERVISOR_DASHBOARD"


# Students act only on their own records and hold no role permissions.
ROLE_PERMISSIONS: Final[dict[Role, frozenset[Permission]]] = {
    Role.ADMIN: frozenset(
        {
            Permission.MANAGE_ALL_USERS,
            Permission.CREATE_INTERN_ACCOUNT,
            Permission.DELETE_USER,
            Permission.MANAGE_SYSTEM,
            Permission.VIEW_ADMIN_DASHBOARD,
            Permission.POST_ANNOUNCEMENT,
            Permission.APPROVE_LOGS,
            Permission.ASSIGN_TASKS,
            Permission.MANAGE_RESOURCES,
        }
    ),
    Role.SUPERVISOR: frozenset(
        {
            Permission.VIEW_SUPERVISOR_DASHBOARD,
            Permission.CREATE_INTERN_ACCOUNT,
            Permission.APPROVE_LOGS,
            Permission.ASSIGN_TASKS,
            Permission.EVALUATE_STUDENT,
            Permission.MANAGE_RESOURCES,
            Permission.POST_ANNOUNCEMENT,
            Permission.SCHEDULE_MEETING,
        }
    ),
    Role.STUDENT: frozenset(),
}


def has_permission(profile: Profile | None, permission: Permission) -> bool:
    if profile is None:
        return False
    return permission in ROLE_PERMISSIONS.get(profile.role, frozenset())
