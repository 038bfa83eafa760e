"""Permission matrix - granted actions per resource."""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from adminrbac.domain.exceptions import InvalidPermissionKey
from adminrbac.domain.value_objects.permission_action import PermissionAction
from adminrbac.domain.value_objects.resource import Resource, allowed_actions


def _parse_resource(key: object) -> Resource:
    try:
        return Resource(key)
    except ValueError:
        raise InvalidPermissionKey(f"Unknown resource: {key!r}") from None


def _parse_action(resource: Resource, action: object) -> PermissionAction:
    try:
        parsed = PermissionAction(action)
    except ValueError:
        raise InvalidPermissionKey(f"Unknown action {action!r} for {resource}") from None
    if parsed not in allowed_actions(resource):
        raise InvalidPermissionKey(f"Action {parsed} is not allowed for {resource}")
    return parsed


@dataclass(frozen=True)
class PermissionMatrix:
    """Immutable mapping resource -> granted actions. Absent means denied."""

    grants: Mapping[Resource, frozenset[PermissionAction]] = field(
        default_factory=lambda: MappingProxyType({})
    )

    @classmethod
    def from_grants(
        cls, grants: Mapping[str, Iterable[str]] | None
    ) -> "PermissionMatrix":
        """Build from {resource: [action, ...]}, validating every key."""
        parsed: dict[Resource, frozenset[PermissionAction]] = {}
        for key, actions in (grants or {}).items():
            resource = _parse_resource(key)
            if isinstance(actions, (str, bytes)) or not isinstance(actions, Iterable):
                raise InvalidPermissionKey(
                    f"Actions for {resource} must be a list, got {actions!r}"
                )
            granted = frozenset(_parse_action(resource, a) for a in actions)
            if granted:
                parsed[resource] = granted
        return cls(MappingProxyType(parsed))

    @classmethod
    def from_legacy(cls, legacy: Mapping[str, object] | None) -> "PermissionMatrix":
        """Migrate the legacy boolean/object permission document.

        ``true`` grants the full canonical action set of the resource,
        ``false`` grants nothing, and ``{action: bool}`` grants the actions
        set to ``true``.
        """
        grants: dict[str, list[str]] = {}
        for key, value in (legacy or {}).items():
            resource = _parse_resource(key)
            if isinstance(value, bool):
                grants[resource] = (
                    [a.value for a in allowed_actions(resource)] if value else []
                )
            elif isinstance(value, Mapping):
                for action in value:
                    _parse_action(resource, action)
                grants[resource] = [a for a, on in value.items() if on is True]
            else:
                raise InvalidPermissionKey(
                    f"Legacy permission for {resource} must be bool or object, got {value!r}"
                )
        return cls.from_grants(grants)

    @classmethod
    def full(cls) -> "PermissionMatrix":
        """Every action on every resource."""
        return cls.from_grants(
            {r.value: [a.value for a in allowed_actions(r)] for r in Resource}
        )

    def allows(self, resource: Resource, action: PermissionAction) -> bool:
        return action in self.grants.get(resource, frozenset())

    def actions_for(self, resource: Resource) -> frozenset[PermissionAction]:
        return self.grants.get(resource, frozenset())

    def to_dict(self) -> dict[str, list[str]]:
        """Serialized form {resource: [action, ...]} with sorted actions."""
        return {
            resource.value: sorted(a.value for a in actions)
            for resource, actions in sorted(self.grants.items())
        }

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PermissionMatrix):
            return NotImplemented
        return dict(self.grants) == dict(other.grants)

    def __hash__(self) -> int:
        return hash(frozenset(self.grants.items()))
