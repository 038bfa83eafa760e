"""Pytest fixtures for adminrbac tests."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from uuid import UUID, uuid4

import pytest

from adminrbac.application.dto.admin_dto import AdminFilter
from adminrbac.application.dto.role_dto import RoleFilter
from adminrbac.application.use_cases.bootstrap.system_roles import SYSTEM_ROLES
from adminrbac.domain.entities import Admin, AuditEntry, Role
from adminrbac.domain.exceptions import Conflict, DuplicateName
from adminrbac.domain.value_objects import (
    AccessLevel,
    AdminStatus,
    PermissionMatrix,
    access_level_for,
)

_DELETED = object()


def _page(items: list, cursor: str | None, limit: int) -> tuple[list, str | None]:
    items.sort(key=lambda x: x.id)
    if cursor:
        cursor_uuid = UUID(cursor)
        items = [x for x in items if x.id > cursor_uuid]
    page = items[: limit + 1]
    next_cursor = str(page[limit - 1].id) if len(page) > limit else None
    return page[:limit], next_cursor


# --- In-memory store ---


class InMemoryStore:
    """Committed state shared by every unit of work of a test.

    Reads see committed rows plus the reading transaction's own writes.
    ``for_update`` reads take a per-row lock held until the transaction ends.
    """

    def __init__(self) -> None:
        self.roles: dict[UUID, Role] = {}
        self.admins: dict[UUID, Admin] = {}
        self._locks: dict[tuple[str, UUID], asyncio.Lock] = {}
        self.commits = 0
        self.rollbacks = 0
        self.fail_commits = 0

    def lock_for(self, kind: str, entity_id: UUID) -> asyncio.Lock:
        return self._locks.setdefault((kind, entity_id), asyncio.Lock())

    def add_role(self, role: Role) -> Role:
        self.roles[role.id] = role
        return role

    def add_admin(self, admin: Admin) -> Admin:
        self.admins[admin.id] = admin
        return admin

    def role_named(self, name: str) -> Role:
        return next(r for r in self.roles.values() if r.name == name and r.is_active)

    def uow_factory(self):
        """UoW factory: commits on normal exit, rolls back on exception."""

        @asynccontextmanager
        async def factory() -> AsyncIterator[FakeUnitOfWork]:
            uow = FakeUnitOfWork(self)
            try:
                yield uow
                await uow.commit()
            except BaseException:
                await uow.rollback()
                raise
            finally:
                uow.release_locks()

        return factory


class _Transaction:
    def __init__(self, store: InMemoryStore) -> None:
        self.store = store
        self.roles: dict[UUID, object] = {}
        self.admins: dict[UUID, object] = {}
        self.role_deltas: dict[UUID, tuple[int, datetime | None]] = {}
        self.base_versions: dict[tuple[str, UUID], int] = {}
        self.held: list[asyncio.Lock] = []
        self.held_keys: set[tuple[str, UUID]] = set()

    async def lock(self, kind: str, entity_id: UUID) -> None:
        key = (kind, entity_id)
        if key in self.held_keys:
            return
        lock = self.store.lock_for(kind, entity_id)
        await lock.acquire()
        self.held.append(lock)
        self.held_keys.add(key)

    def current_role(self, role_id: UUID) -> Role | None:
        pending = self.roles.get(role_id)
        if pending is _DELETED:
            return None
        role = pending or self.store.roles.get(role_id)
        if role is None:
            return None
        delta, assigned_at = self.role_deltas.get(role_id, (0, None))
        return replace(
            role,
            assigned_users_count=max(role.assigned_users_count + delta, 0),
            last_assigned_at=assigned_at or role.last_assigned_at,
        )

    def all_roles(self) -> list[Role]:
        ids = set(self.store.roles) | set(self.roles)
        return [r for r in (self.current_role(i) for i in ids) if r is not None]

    def current_admin(self, admin_id: UUID) -> Admin | None:
        admin = self.admins.get(admin_id) or self.store.admins.get(admin_id)
        return replace(admin) if admin else None

    def all_admins(self) -> list[Admin]:
        ids = set(self.store.admins) | set(self.admins)
        return [a for a in (self.current_admin(i) for i in ids) if a is not None]


class FakeRoleRepository:
    """In-memory role repository."""

    def __init__(self, tx: _Transaction) -> None:
        self._tx = tx

    async def get_by_id(self, role_id: UUID, *, for_update: bool = False) -> Role | None:
        if for_update:
            await self._tx.lock("role", role_id)
        await asyncio.sleep(0)
        return self._tx.current_role(role_id)

    async def get_by_name(self, name: str, *, active_only: bool = True) -> Role | None:
        matches = [r for r in self._tx.all_roles() if r.name == name]
        if active_only:
            matches = [r for r in matches if r.is_active]
        matches.sort(key=lambda r: (not r.is_active, r.created_at), reverse=False)
        return matches[0] if matches else None

    async def list(
        self,
        *,
        role_filter: RoleFilter | None = None,
        cursor: str | None = None,
        limit: int = 20,
    ) -> tuple[list[Role], str | None]:
        f = role_filter or RoleFilter(is_active=None)
        items = [
            r
            for r in self._tx.all_roles()
            if (f.is_active is None or r.is_active == f.is_active)
            and (f.is_system_role is None or r.is_system_role == f.is_system_role)
            and (f.parent_role_id is None or r.parent_role_id == f.parent_role_id)
            and (f.min_level is None or r.level >= f.min_level)
            and (f.max_level is None or r.level <= f.max_level)
            and (not f.name_contains or f.name_contains.lower() in r.name.lower())
        ]
        return _page(items, cursor, limit)

    async def list_children(self, parent_role_id: UUID) -> list[Role]:
        children = [r for r in self._tx.all_roles() if r.parent_role_id == parent_role_id]
        return sorted(children, key=lambda r: (r.level, r.name))

    async def count_children(self, parent_role_id: UUID) -> int:
        return len(await self.list_children(parent_role_id))

    async def create(self, role: Role) -> Role:
        if role.is_active and await self.get_by_name(role.name):
            raise DuplicateName(f"role {role.name}")
        self._tx.roles[role.id] = replace(role)
        return role

    async def update(self, role: Role) -> None:
        current = self._tx.current_role(role.id)
        if current is None or current.version != role.version:
            raise Conflict(f"Role {role.id} was modified concurrently")
        self._tx.base_versions.setdefault(("role", role.id), current.version)
        stored = replace(
            role,
            version=role.version + 1,
            assigned_users_count=current.assigned_users_count
            - self._tx.role_deltas.get(role.id, (0, None))[0],
            last_assigned_at=current.last_assigned_at,
        )
        self._tx.roles[role.id] = stored
        role.version += 1

    async def delete(self, role_id: UUID) -> None:
        self._tx.roles[role_id] = _DELETED

    async def adjust_assigned_users(
        self, role_id: UUID, delta: int, assigned_at: datetime | None = None
    ) -> None:
        previous, previous_at = self._tx.role_deltas.get(role_id, (0, None))
        self._tx.role_deltas[role_id] = (previous + delta, assigned_at or previous_at)


class FakeAdminRepository:
    """In-memory admin repository."""

    def __init__(self, tx: _Transaction) -> None:
        self._tx = tx

    async def get_by_id(self, admin_id: UUID, *, for_update: bool = False) -> Admin | None:
        if for_update:
            await self._tx.lock("admin", admin_id)
        await asyncio.sleep(0)
        return self._tx.current_admin(admin_id)

    async def get_by_email(self, email: str) -> Admin | None:
        email = email.lower()
        return next((a for a in self._tx.all_admins() if a.email == email), None)

    async def list(
        self,
        *,
        admin_filter: AdminFilter | None = None,
        cursor: str | None = None,
        limit: int = 20,
    ) -> tuple[list[Admin], str | None]:
        f = admin_filter or AdminFilter()
        items = [
            a
            for a in self._tx.all_admins()
            if (f.status is None or a.status == f.status)
            and (f.role_id is None or a.role_id == f.role_id)
            and (f.manager_id is None or a.manager_id == f.manager_id)
            and (f.access_level is None or a.access_level == f.access_level)
            and (f.team_id is None or a.team_id == f.team_id)
        ]
        return _page(items, cursor, limit)

    async def create(self, admin: Admin) -> Admin:
        if await self.get_by_email(admin.email):
            raise DuplicateName(f"admin {admin.email}")
        self._tx.admins[admin.id] = replace(admin)
        return admin

    async def update(self, admin: Admin) -> None:
        current = self._tx.current_admin(admin.id)
        if current is None or current.version != admin.version:
            raise Conflict(f"Admin {admin.id} was modified concurrently")
        self._tx.base_versions.setdefault(("admin", admin.id), current.version)
        self._tx.admins[admin.id] = replace(admin, version=admin.version + 1)
        admin.version += 1

    async def relabel_role_holders(self, role_id: UUID, access_level: AccessLevel) -> int:
        changed = 0
        for admin in self._tx.all_admins():
            if admin.role_id != role_id or admin.access_level == access_level:
                continue
            self._tx.base_versions.setdefault(("admin", admin.id), admin.version)
            self._tx.admins[admin.id] = replace(
                admin, access_level=access_level, version=admin.version + 1
            )
            changed += 1
        return changed


class FakeUnitOfWork:
    """Fake UoW over an InMemoryStore; writes become visible on commit."""

    def __init__(self, store: InMemoryStore | None = None) -> None:
        self.store = store or InMemoryStore()
        self._tx = _Transaction(self.store)
        self.roles = FakeRoleRepository(self._tx)
        self.admins = FakeAdminRepository(self._tx)
        self.committed = False

    async def commit(self) -> None:
        store = self.store
        if store.fail_commits > 0:
            store.fail_commits -= 1
            raise Conflict("could not serialize access due to concurrent update")
        for (kind, entity_id), base in self._tx.base_versions.items():
            committed = (store.roles if kind == "role" else store.admins).get(entity_id)
            if committed is not None and committed.version != base:
                raise Conflict(f"{kind} {entity_id} was modified concurrently")

        for entity_id, pending in self._tx.roles.items():
            if pending is _DELETED:
                store.roles.pop(entity_id, None)
            else:
                committed = store.roles.get(entity_id)
                if committed:
                    pending = replace(
                        pending,
                        assigned_users_count=committed.assigned_users_count,
                        last_assigned_at=committed.last_assigned_at,
                    )
                store.roles[entity_id] = pending
        for role_id, (delta, assigned_at) in self._tx.role_deltas.items():
            role = store.roles.get(role_id)
            if role:
                store.roles[role_id] = replace(
                    role,
                    assigned_users_count=max(role.assigned_users_count + delta, 0),
                    last_assigned_at=assigned_at or role.last_assigned_at,
                )
        store.admins.update(self._tx.admins)
        self._tx.roles.clear()
        self._tx.admins.clear()
        self._tx.base_versions.clear()
        self._tx.role_deltas.clear()
        self.committed = True
        store.commits += 1

    async def rollback(self) -> None:
        self._tx.roles.clear()
        self._tx.base_versions.clear()
        self._tx.admins.clear()
        self._tx.role_deltas.clear()
        self.store.rollbacks += 1

    def release_locks(self) -> None:
        for lock in self._tx.held:
            lock.release()
        self._tx.held.clear()
        self._tx.held_keys.clear()


# --- Audit and permission doubles ---


class RecordingAuditLogger:
    def __init__(self, fail: bool = False) -> None:
        self.entries: list[AuditEntry] = []
        self.fail = fail

    async def record(self, entry: AuditEntry) -> None:
        if self.fail:
            raise RuntimeError("audit sink unavailable")
        self.entries.append(entry)


class StaticPermissionResolver:
    """Resolver that answers the same for every question."""

    def __init__(self, allowed: bool = True) -> None:
        self.allowed = allowed
        self.calls: list[tuple] = []

    async def can(self, admin_id, resource, action) -> bool:
        self.calls.append((admin_id, resource, action))
        return self.allowed


# --- Builders ---


def make_role(
    name: str,
    level: int,
    *,
    permissions: dict[str, list[str]] | None = None,
    is_system_role: bool = False,
    can_create_sub_roles: bool = False,
    max_sub_roles: int | None = None,
    can_manage_users: bool = False,
    max_sub_users: int | None = None,
    parent_role_id: UUID | None = None,
    is_active: bool = True,
    assigned_users_count: int = 0,
) -> Role:
    now = datetime.now(UTC)
    return Role(
        id=uuid4(),
        name=name,
        display_name=name.replace("_", " ").title(),
        description="",
        level=level,
        permissions=PermissionMatrix.from_grants(permissions or {}),
        is_system_role=is_system_role,
        is_custom_role=not is_system_role,
        can_create_sub_roles=can_create_sub_roles,
        max_sub_roles=max_sub_roles,
        can_manage_users=can_manage_users,
        max_sub_users=max_sub_users,
        parent_role_id=parent_role_id,
        is_active=is_active,
        assigned_users_count=assigned_users_count,
        created_at=now,
        updated_at=now,
        created_by="system",
    )


def make_admin(
    role: Role,
    *,
    email: str | None = None,
    status: AdminStatus = AdminStatus.ACTIVE,
    can_create_sub_users: bool | None = None,
    max_sub_users: int | None = None,
    created_sub_users_count: int = 0,
    manager_id: UUID | None = None,
) -> Admin:
    now = datetime.now(UTC)
    can_create = role.can_manage_users if can_create_sub_users is None else can_create_sub_users
    return Admin(
        id=uuid4(),
        email=email or f"{role.name}-{uuid4().hex[:6]}@example.com",
        role_id=role.id,
        access_level=access_level_for(role.level),
        status=status,
        can_create_sub_users=can_create,
        max_sub_users=max_sub_users if max_sub_users is not None else role.max_sub_users,
        created_sub_users_count=created_sub_users_count,
        manager_id=manager_id,
        created_at=now,
        updated_at=now,
    )


def system_role(name: str) -> Role:
    """Build the seeded system role ``name``."""
    definition = next(d for d in SYSTEM_ROLES if d["name"] == name)
    role = make_role(
        name,
        definition["level"],
        is_system_role=True,
        can_create_sub_roles=definition.get("can_create_sub_roles", False),
        can_manage_users=definition.get("can_manage_users", False),
        max_sub_users=definition.get("max_sub_users"),
    )
    role.permissions = PermissionMatrix.from_legacy(definition["permissions"])
    role.display_name = definition["display_name"]
    return role


@dataclass
class Seeded:
    """System roles plus one admin per interesting role."""

    store: InMemoryStore
    roles: dict[str, Role] = field(default_factory=dict)
    root: Admin | None = None
    ops: Admin | None = None
    support: Admin | None = None
    agent: Admin | None = None

    def role(self, name: str) -> Role:
        return self.store.roles[self.roles[name].id]

    def admin(self, admin_id: UUID) -> Admin:
        return self.store.admins[admin_id]


# --- Fixtures ---


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def uow_factory(store: InMemoryStore):
    return store.uow_factory()


@pytest.fixture
def seeded(store: InMemoryStore) -> Seeded:
    data = Seeded(store=store)
    for definition in SYSTEM_ROLES:
        data.roles[definition["name"]] = store.add_role(system_role(definition["name"]))

    def admin_with(role_name: str, **kwargs) -> Admin:
        role = store.roles[data.roles[role_name].id]
        admin = store.add_admin(make_admin(role, **kwargs))
        store.roles[role.id] = replace(role, assigned_users_count=role.assigned_users_count + 1)
        return admin

    data.root = admin_with("super_admin", email="root@example.com", can_create_sub_users=True)
    data.ops = admin_with("ops_admin", email="ops@example.com", manager_id=data.root.id)
    data.support = admin_with("support_admin", email="support@example.com", manager_id=data.root.id)
    data.agent = admin_with(
        "merchant_support_agent", email="agent@example.com", manager_id=data.support.id
    )
    return data


@pytest.fixture
def audit_logger() -> RecordingAuditLogger:
    return RecordingAuditLogger()


@pytest.fixture
def allow_all() -> StaticPermissionResolver:
    return StaticPermissionResolver(allowed=True)
