from __future__ import annotations

import pytest

from internsync.domain.mapping import map_profile
from internsync.domain.model import Profile, Role
from internsync.domain.permissions import ROLE_PERMISSIONS, Permission, has_permission
from tests.support.records import profile_row


def _profile(role: Role) -> Profile:
    return map_profile(profile_row("u1", "u1@example.com", role=role))


@pytest.mark.parametrize(
    ("role", "permission", "expected"),
    [
        (Role.ADMIN, Permission.MANAGE_ALL_USERS, True),
        (Role.ADMIN, Permission.SCHEDULE_MEETING, False),
        (Role.SUPERVISOR, Permission.CREATE_INTERN_ACCOUNT, True),
        (Role.SUPERVISOR, Permission.DELETE_USER, False),
        (Role.SUPERVISOR, Permission.EVALUATE_STUDENT, True),
        (Role.STUDENT, Permission.POST_ANNOUNCEMENT, False),
    ],
)
def test_role_permissions(
    role: Role,
    permission: Permission,
    expected: bool,  # noqa: FBT001
) -> None:
    assert has_permission(_profile(role), permission) is expected


def test_students_hold_no_permissions() -> None:
    assert ROLE_PERMISSIONS[Role.STUDENT] == frozenset()


def test_missing_profile_has_no_permissions() -> None:
    assert not has_permission(None, Permission.VIEW_ADMIN_DASHBOARD)
