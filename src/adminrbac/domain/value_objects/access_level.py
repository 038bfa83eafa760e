"""Access level - denormalized label derived from a role's level."""

from enum import StrEnum

from adminrbac.domain.exceptions import InvalidLevel

MIN_LEVEL = 0
MAX_LEVEL = 100


class AccessLevel(StrEnum):
    """Labels used for quick filtering of admins."""

    SUPER_ADMIN = "super_admin"
    SYSTEM_ADMIN = "system_admin"
    OPS_ADMIN = "ops_admin"
    FINANCE_ADMIN = "finance_admin"
    SUPPORT_ADMIN = "support_admin"
    AUDIT_ADMIN = "audit_admin"
    MERCHANT_SUPPORT_LEAD = "merchant_support_lead"
    MERCHANT_SUPPORT_AGENT = "merchant_support_agent"


# (upper bound inclusive, label), checked in order after the level 0 special case
_BANDS: tuple[tuple[int, AccessLevel], ...] = (
    (10, AccessLevel.SYSTEM_ADMIN),
    (20, AccessLevel.OPS_ADMIN),
    (30, AccessLevel.FINANCE_ADMIN),
    (40, AccessLevel.SUPPORT_ADMIN),
    (50, AccessLevel.AUDIT_ADMIN),
    (60, AccessLevel.MERCHANT_SUPPORT_LEAD),
)


def validate_level(level: int) -> int:
    """Return level if within range, else raise InvalidLevel."""
    if isinstance(level, bool) or not isinstance(level, int):
        raise InvalidLevel(f"Role level must be an integer, got {level!r}")
    if not MIN_LEVEL <= level <= MAX_LEVEL:
        raise InvalidLevel(f"Role level must be between {MIN_LEVEL} and {MAX_LEVEL}, got {level}")
    return level


def access_level_for(level: int) -> AccessLevel:
    """Map a role level to its access level label.

    Level 0 is always super_admin; the remaining levels fall into fixed bands
    of ten, and anything above 60 is a merchant support agent.
    """
    validate_level(level)
    if level == MIN_LEVEL:
        return AccessLevel.SUPER_ADMIN
    for upper, label in _BANDS:
        if level <= upper:
            return label
    return AccessLevel.MERCHANT_SUPPORT_AGENT
