"""Unit tests for ProvisioningGuard: atomicity, quotas, retries and audit."""

import asyncio
from uuid import uuid4

import pytest

from adminrbac.application.dto import AdminDraft, RoleDraft
from adminrbac.application.use_cases.provisioning import ProvisioningGuard
from adminrbac.application.use_cases.role import DeactivateRoleUseCase
from adminrbac.domain.exceptions import (
    Conflict,
    InvalidStatusTransition,
    NotFound,
    PermissionDenied,
    PrivilegeEscalation,
    QuotaExceeded,
    RoleInUse,
)
from adminrbac.domain.value_objects import AccessLevel, AdminStatus

from tests.conftest import RecordingAuditLogger, make_admin, make_role


def _draft(seeded, email: str, role_name: str = "viewer") -> AdminDraft:
    return AdminDraft(email=email, role_id=seeded.role(role_name).id)


# --- sub-user creation ---


@pytest.mark.asyncio
async def test_create_admin_commits_admin_and_counter_together(seeded, store, uow_factory, audit_logger) -> None:
    guard = ProvisioningGuard(uow_factory, audit_logger)
    admin = await guard.create_admin(_draft(seeded, "new@example.com"), seeded.support.id)

    assert store.admins[admin.id].manager_id == seeded.support.id
    assert store.admins[seeded.support.id].created_sub_users_count == 1
    assert [(e.action, e.resource) for e in audit_logger.entries] == [
        ("create", "admin"),
        ("update", "admin"),
    ]
    assert audit_logger.entries[0].after["email"] == "new@example.com"
    assert audit_logger.entries[1].before == {"created_sub_users_count": 0}
    assert audit_logger.entries[1].after == {"created_sub_users_count": 1}


@pytest.mark.asyncio
async def test_failed_creation_leaves_nothing_behind(seeded, store, uow_factory, audit_logger) -> None:
    guard = ProvisioningGuard(uow_factory, audit_logger)
    admins_before = set(store.admins)
    with pytest.raises(PrivilegeEscalation):
        await guard.create_admin(_draft(seeded, "x@example.com", "finance_admin"), seeded.support.id)
    assert set(store.admins) == admins_before
    assert store.admins[seeded.support.id].created_sub_users_count == 0
    assert audit_logger.entries == []


@pytest.mark.asyncio
async def test_concurrent_creations_never_overshoot_quota(seeded, store, uow_factory) -> None:
    quota, attempts = 3, 8
    creator = store.add_admin(
        make_admin(seeded.role("support_admin"), email="lead@example.com", max_sub_users=quota)
    )
    guard = ProvisioningGuard(uow_factory)

    results = await asyncio.gather(
        *(
            guard.create_admin(_draft(seeded, f"user{i}@example.com"), creator.id)
            for i in range(attempts)
        ),
        return_exceptions=True,
    )

    created = [r for r in results if not isinstance(r, Exception)]
    rejected = [r for r in results if isinstance(r, QuotaExceeded)]
    assert len(created) == quota
    assert len(rejected) == attempts - quota
    assert store.admins[creator.id].created_sub_users_count == quota
    managed = [a for a in store.admins.values() if a.manager_id == creator.id]
    assert len(managed) == quota


@pytest.mark.asyncio
async def test_concurrent_creations_from_partial_quota(seeded, store, uow_factory) -> None:
    creator = store.add_admin(
        make_admin(
            seeded.role("support_admin"),
            email="lead@example.com",
            max_sub_users=5,
            created_sub_users_count=3,
        )
    )
    guard = ProvisioningGuard(uow_factory)
    results = await asyncio.gather(
        *(guard.create_admin(_draft(seeded, f"u{i}@example.com"), creator.id) for i in range(4)),
        return_exceptions=True,
    )
    assert sum(not isinstance(r, Exception) for r in results) == 2
    assert store.admins[creator.id].created_sub_users_count == 5


@pytest.mark.asyncio
async def test_conflict_is_retried(seeded, store, uow_factory) -> None:
    store.fail_commits = 2
    guard = ProvisioningGuard(uow_factory, max_attempts=3)
    admin = await guard.create_admin(_draft(seeded, "retry@example.com"), seeded.root.id)
    assert admin.id in store.admins
    assert store.rollbacks == 2
    assert store.admins[seeded.root.id].created_sub_users_count == 1


@pytest.mark.asyncio
async def test_conflict_surfaces_after_retry_budget(seeded, store, uow_factory) -> None:
    store.fail_commits = 5
    guard = ProvisioningGuard(uow_factory, max_attempts=2)
    with pytest.raises(Conflict):
        await guard.create_admin(_draft(seeded, "retry@example.com"), seeded.root.id)
    assert store.fail_commits == 3
    assert store.admins[seeded.root.id].created_sub_users_count == 0


@pytest.mark.asyncio
async def test_audit_failure_does_not_undo_mutation(seeded, store, uow_factory) -> None:
    guard = ProvisioningGuard(uow_factory, RecordingAuditLogger(fail=True))
    admin = await guard.create_admin(_draft(seeded, "quiet@example.com"), seeded.root.id)
    assert admin.id in store.admins


@pytest.mark.asyncio
async def test_unknown_creator_not_found(seeded, uow_factory) -> None:
    with pytest.raises(NotFound):
        await ProvisioningGuard(uow_factory).create_admin(
            _draft(seeded, "x@example.com"), uuid4()
        )


# --- role assignment ---


@pytest.mark.asyncio
async def test_support_admin_cannot_hand_out_finance_role(seeded, store, uow_factory) -> None:
    """A level-40 assigner cannot grant a level-30 role."""
    guard = ProvisioningGuard(uow_factory)
    with pytest.raises(PrivilegeEscalation):
        await guard.assign_role(
            seeded.agent.id, seeded.role("finance_admin").id, seeded.support.id
        )
    assert store.admins[seeded.agent.id].role_id == seeded.roles["merchant_support_agent"].id


@pytest.mark.asyncio
async def test_super_admin_demotes_system_admin(seeded, store, uow_factory, audit_logger) -> None:
    """Level 10 -> level 70 recomputes access level to merchant_support_agent."""
    sysadmin = store.add_admin(make_admin(seeded.role("system_admin"), email="sys@example.com"))
    guard = ProvisioningGuard(uow_factory, audit_logger)

    updated = await guard.assign_role(
        sysadmin.id, seeded.role("merchant_support_agent").id, seeded.root.id
    )

    assert updated.access_level == AccessLevel.MERCHANT_SUPPORT_AGENT
    assert store.admins[sysadmin.id].access_level == AccessLevel.MERCHANT_SUPPORT_AGENT
    assert audit_logger.entries[-1].action == "assign_role"
    assert audit_logger.entries[-1].before["access_level"] == "system_admin"
    assert audit_logger.entries[-1].after["access_level"] == "merchant_support_agent"


@pytest.mark.asyncio
async def test_assigner_must_outrank_current_role(seeded, store, uow_factory) -> None:
    """Support cannot move an ops admin, even to a role below support."""
    guard = ProvisioningGuard(uow_factory)
    with pytest.raises(PrivilegeEscalation):
        await guard.assign_role(seeded.ops.id, seeded.role("viewer").id, seeded.support.id)
    assert store.admins[seeded.ops.id].role_id == seeded.roles["ops_admin"].id


@pytest.mark.asyncio
async def test_assign_inactive_role_not_found(seeded, store, uow_factory) -> None:
    retired = store.add_role(make_role("retired", 80, is_active=False))
    with pytest.raises(NotFound):
        await ProvisioningGuard(uow_factory).assign_role(
            seeded.agent.id, retired.id, seeded.root.id
        )


@pytest.mark.asyncio
async def test_assign_role_moves_usage_counters(seeded, store, uow_factory) -> None:
    guard = ProvisioningGuard(uow_factory)
    await guard.assign_role(seeded.agent.id, seeded.role("viewer").id, seeded.support.id)
    assert store.roles[seeded.roles["viewer"].id].assigned_users_count == 1
    assert store.roles[seeded.roles["merchant_support_agent"].id].assigned_users_count == 0


@pytest.mark.asyncio
async def test_reassign_same_role_keeps_counters(seeded, store, uow_factory) -> None:
    role_id = seeded.roles["merchant_support_agent"].id
    await ProvisioningGuard(uow_factory).assign_role(seeded.agent.id, role_id, seeded.support.id)
    assert store.roles[role_id].assigned_users_count == 1


# --- sub-role creation ---


@pytest.mark.asyncio
async def test_ops_lead_sub_role_quota(store, uow_factory, audit_logger) -> None:
    """Level-20 role with two sub-role slots: 30 and 40 succeed, 50 is over quota."""
    ops_lead = store.add_role(
        make_role("ops_lead", 20, can_create_sub_roles=True, max_sub_roles=2)
    )
    lead = store.add_admin(make_admin(ops_lead, email="lead@example.com"))
    guard = ProvisioningGuard(uow_factory, audit_logger)

    first = await guard.create_sub_role(RoleDraft(name="ops_tier_two", level=30), lead.id)
    second = await guard.create_sub_role(RoleDraft(name="ops_tier_three", level=40), lead.id)
    with pytest.raises(QuotaExceeded):
        await guard.create_sub_role(RoleDraft(name="ops_tier_four", level=50), lead.id)

    assert store.roles[first.id].parent_role_id == ops_lead.id
    assert store.roles[second.id].parent_role_id == ops_lead.id
    assert store.roles[first.id].created_by == str(lead.id)
    assert not any(r.name == "ops_tier_four" for r in store.roles.values())
    assert [e.resource_id for e in audit_logger.entries] == [str(first.id), str(second.id)]


@pytest.mark.asyncio
async def test_sub_role_above_creator_rejected(store, uow_factory) -> None:
    ops_lead = store.add_role(make_role("ops_lead", 20, can_create_sub_roles=True))
    lead = store.add_admin(make_admin(ops_lead))
    with pytest.raises(PrivilegeEscalation):
        await ProvisioningGuard(uow_factory).create_sub_role(
            RoleDraft(name="boss", level=10), lead.id
        )


@pytest.mark.asyncio
async def test_sub_role_parent_is_always_creator_role(seeded, store, uow_factory) -> None:
    ops_lead = store.add_role(make_role("ops_lead", 20, can_create_sub_roles=True))
    lead = store.add_admin(make_admin(ops_lead))
    role = await ProvisioningGuard(uow_factory).create_sub_role(
        RoleDraft(name="tier", level=30, parent_role_id=seeded.roles["viewer"].id), lead.id
    )
    assert store.roles[role.id].parent_role_id == ops_lead.id


@pytest.mark.asyncio
async def test_concurrent_sub_roles_respect_quota(store, uow_factory) -> None:
    ops_lead = store.add_role(
        make_role("ops_lead", 20, can_create_sub_roles=True, max_sub_roles=2)
    )
    lead = store.add_admin(make_admin(ops_lead))
    guard = ProvisioningGuard(uow_factory)
    results = await asyncio.gather(
        *(guard.create_sub_role(RoleDraft(name=f"tier_{i}", level=30 + i), lead.id) for i in range(5)),
        return_exceptions=True,
    )
    assert sum(not isinstance(r, Exception) for r in results) == 2
    assert sum(isinstance(r, QuotaExceeded) for r in results) == 3
    assert len([r for r in store.roles.values() if r.parent_role_id == ops_lead.id]) == 2

# --- status transitions ---


@pytest.mark.asyncio
async def test_suspend_reactivate_deactivate(seeded, store, uow_factory, audit_logger) -> None:
    guard = ProvisioningGuard(uow_factory, audit_logger)
    await guard.suspend_admin(seeded.agent.id, seeded.support.id, "review")
    assert store.admins[seeded.agent.id].status == AdminStatus.SUSPENDED
    assert store.admins[seeded.agent.id].status_reason == "review"
    await guard.reactivate_admin(seeded.agent.id, seeded.support.id)
    await guard.deactivate_admin(seeded.agent.id, seeded.support.id, "left")
    assert store.admins[seeded.agent.id].status == AdminStatus.INACTIVE
    assert [e.action for e in audit_logger.entries] == [
        "status_suspended",
        "status_active",
        "status_inactive",
    ]
    with pytest.raises(InvalidStatusTransition):
        await guard.reactivate_admin(seeded.agent.id, seeded.support.id)


@pytest.mark.asyncio
async def test_deactivation_does_not_touch_quota(seeded, store, uow_factory) -> None:
    guard = ProvisioningGuard(uow_factory)
    await guard.create_admin(_draft(seeded, "sub@example.com"), seeded.support.id)
    await guard.deactivate_admin(seeded.support.id, seeded.root.id)
    assert store.admins[seeded.support.id].created_sub_users_count == 1


@pytest.mark.asyncio
async def test_status_change_requires_outranking(seeded, uow_factory) -> None:
    with pytest.raises(PrivilegeEscalation):
        await ProvisioningGuard(uow_factory).suspend_admin(seeded.ops.id, seeded.support.id)


@pytest.mark.asyncio
async def test_inactive_actor_cannot_change_status(seeded, store, uow_factory) -> None:
    store.admins[seeded.support.id].status = AdminStatus.INACTIVE
    with pytest.raises(PermissionDenied):
        await ProvisioningGuard(uow_factory).suspend_admin(seeded.agent.id, seeded.support.id)


# --- role deactivation racing an assignment ---


@pytest.mark.asyncio
@pytest.mark.parametrize("deactivate_first", [True, False])
async def test_deactivation_and_assignment_never_both_commit(
    seeded, store, uow_factory, allow_all, deactivate_first
) -> None:
    role = store.add_role(make_role("night_shift", 80))
    guard = ProvisioningGuard(uow_factory)
    deactivate = DeactivateRoleUseCase(uow_factory, allow_all).execute(seeded.root.id, role.id)
    assign = guard.assign_role(seeded.agent.id, role.id, seeded.root.id)
    calls = [deactivate, assign] if deactivate_first else [assign, deactivate]

    results = await asyncio.gather(*calls, return_exceptions=True)
    if not deactivate_first:
        results.reverse()
    deactivated, assigned = results

    stored_role = store.roles[role.id]
    agent = store.admins[seeded.agent.id]
    if agent.role_id == role.id:
        assert isinstance(deactivated, RoleInUse)
        assert stored_role.is_active
        assert stored_role.assigned_users_count == 1
    else:
        assert isinstance(assigned, NotFound)
        assert not stored_role.is_active
        assert stored_role.assigned_users_count == 0


@pytest.mark.asyncio
async def test_inactive_admin_cannot_be_reassigned(seeded, store, uow_factory) -> None:
    guard = ProvisioningGuard(uow_factory)
    await guard.deactivate_admin(seeded.agent.id, seeded.root.id, "left")
    viewer = seeded.role("viewer")
    agent_role = seeded.role("merchant_support_agent")

    with pytest.raises(InvalidStatusTransition, match="inactive"):
        await guard.assign_role(seeded.agent.id, viewer.id, seeded.root.id)

    assert store.admins[seeded.agent.id].role_id == agent_role.id
    assert store.roles[viewer.id].assigned_users_count == viewer.assigned_users_count
    assert store.roles[agent_role.id].assigned_users_count == agent_role.assigned_users_count
