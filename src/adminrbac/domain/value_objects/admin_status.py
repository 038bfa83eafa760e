"""Admin account status and allowed transitions."""

from enum import StrEnum


class AdminStatus(StrEnum):
    """Lifecycle: active <-> suspended -> inactive (terminal)."""

    ACTIVE = "active"
    SUSPENDED = "suspended"
    INACTIVE = "inactive"

    def can_transition_to(self, target: "AdminStatus") -> bool:
        return target in _TRANSITIONS[self]


_TRANSITIONS: dict[AdminStatus, frozenset[AdminStatus]] = {
    AdminStatus.ACTIVE: frozenset({AdminStatus.SUSPENDED, AdminStatus.INACTIVE}),
    AdminStatus.SUSPENDED: frozenset({AdminStatus.ACTIVE, AdminStatus.INACTIVE}),
    AdminStatus.INACTIVE: frozenset(),
}
