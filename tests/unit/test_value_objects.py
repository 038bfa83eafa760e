"""Unit tests for access levels, admin status and resources."""

import pytest

from adminrbac.domain.exceptions import InvalidLevel
from adminrbac.domain.value_objects import (
    RESOURCE_ACTIONS,
    AccessLevel,
    AdminStatus,
    PermissionAction,
    Resource,
    access_level_for,
)
from adminrbac.domain.value_objects.access_level import validate_level


@pytest.mark.parametrize(
    ("level", "expected"),
    [
        (0, AccessLevel.SUPER_ADMIN),
        (1, AccessLevel.SYSTEM_ADMIN),
        (10, AccessLevel.SYSTEM_ADMIN),
        (11, AccessLevel.OPS_ADMIN),
        (20, AccessLevel.OPS_ADMIN),
        (30, AccessLevel.FINANCE_ADMIN),
        (40, AccessLevel.SUPPORT_ADMIN),
        (45, AccessLevel.AUDIT_ADMIN),
        (50, AccessLevel.AUDIT_ADMIN),
        (60, AccessLevel.MERCHANT_SUPPORT_LEAD),
        (61, AccessLevel.MERCHANT_SUPPORT_AGENT),
        (70, AccessLevel.MERCHANT_SUPPORT_AGENT),
        (100, AccessLevel.MERCHANT_SUPPORT_AGENT),
    ],
)
def test_access_level_bands(level: int, expected: AccessLevel) -> None:
    assert access_level_for(level) == expected


@pytest.mark.parametrize("level", [-1, 101, 3.5, "10", True, None])
def test_invalid_levels_rejected(level) -> None:
    with pytest.raises(InvalidLevel):
        validate_level(level)


def test_access_level_for_rejects_out_of_range() -> None:
    with pytest.raises(InvalidLevel):
        access_level_for(150)


def test_admin_status_transitions() -> None:
    """active <-> suspended -> inactive; inactive is terminal."""
    assert AdminStatus.ACTIVE.can_transition_to(AdminStatus.SUSPENDED)
    assert AdminStatus.SUSPENDED.can_transition_to(AdminStatus.ACTIVE)
    assert AdminStatus.ACTIVE.can_transition_to(AdminStatus.INACTIVE)
    assert AdminStatus.SUSPENDED.can_transition_to(AdminStatus.INACTIVE)
    for target in AdminStatus:
        assert not AdminStatus.INACTIVE.can_transition_to(target)


def test_every_resource_has_an_action_set() -> None:
    assert set(RESOURCE_ACTIONS) == set(Resource)
    assert all(PermissionAction.READ in actions for actions in RESOURCE_ACTIONS.values())


def test_merchant_management_actions() -> None:
    assert RESOURCE_ACTIONS[Resource.MERCHANT_MANAGEMENT] == {
        PermissionAction.READ,
        PermissionAction.WRITE,
        PermissionAction.DELETE,
        PermissionAction.SUSPEND,
        PermissionAction.TERMINATE,
    }


def test_resource_keys_use_console_names() -> None:
    assert Resource("systemConfig") is Resource.SYSTEM_CONFIG
    assert Resource("aiPrompts") is Resource.AI_PROMPTS
    assert len(Resource) == 14
