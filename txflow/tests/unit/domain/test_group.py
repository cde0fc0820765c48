from __future__ import annotations

import pytest

from txflow.domain.builders import build_asset_transfer, build_payment
from txflow.domain.errors import EmptyGroup, GroupSealed, GroupTooLarge
from txflow.domain.group import AtomicGroupBuilder, GroupState, as_group, derive_group_id, single
from txflow.tests.unit.helpers import RECEIVER, SENDER


def _members():
    return [
        build_payment(SENDER, RECEIVER, 1_000_000),
        build_asset_transfer(SENDER, RECEIVER, 42, 1_000_000),
    ]


def test_state_machine_moves_empty_building_sealed():
    builder = AtomicGroupBuilder()
    assert builder.state is GroupState.EMPTY

    builder.add_member(_members()[0])
    assert builder.state is GroupState.BUILDING

    group = builder.seal()
    assert builder.state is GroupState.SEALED
    assert group.members == (_members()[0],)


def test_sealing_twice_yields_same_identity():
    first = AtomicGroupBuilder().extend(_members())
    second = AtomicGroupBuilder().extend(_members())

    assert first.seal() is first.seal()
    assert first.seal().group_id == second.seal().group_id
    assert first.seal().group_id == derive_group_id(_members())


def test_identity_depends_on_member_order():
    members = _members()
    forward = AtomicGroupBuilder().extend(members).seal()
    backward = AtomicGroupBuilder().extend(reversed(members)).seal()

    assert forward.group_id != backward.group_id


def test_seal_empty_fails():
    with pytest.raises(EmptyGroup):
        AtomicGroupBuilder().seal()


def test_sealed_group_rejects_new_members():
    builder = AtomicGroupBuilder().extend(_members())
    group = builder.seal()

    with pytest.raises(GroupSealed):
        builder.add_member(build_payment(SENDER, RECEIVER, 1))
    assert len(group) == 2
    assert group.is_atomic


def test_oversized_group_fails_at_seal_and_stays_open():
    builder = AtomicGroupBuilder(max_size=16)
    for n in range(17):
        builder.add_member(build_payment(SENDER, RECEIVER, n))

    with pytest.raises(GroupTooLarge):
        builder.seal()

    assert builder.state is GroupState.BUILDING


def test_sixteen_members_fit():
    builder = AtomicGroupBuilder()
    builder.extend(build_payment(SENDER, RECEIVER, n) for n in range(16))

    assert len(builder.seal()) == 16


def test_add_member_requires_request():
    with pytest.raises(TypeError):
        AtomicGroupBuilder().add_member({"type": "pay"})


def test_single_request_is_degenerate_group():
    payment = _members()[0]
    group = single(payment)

    assert len(group) == 1
    assert not group.is_atomic
    assert as_group(payment) == group
    assert as_group(group) is group


def test_as_group_seals_request_lists_within_max_size():
    members = _members()

    assert as_group(members) == AtomicGroupBuilder().extend(members).seal()
    with pytest.raises(GroupTooLarge):
        as_group(members, max_size=1)
    with pytest.raises(GroupTooLarge):
        as_group(AtomicGroupBuilder().extend(members).seal(), max_size=1)
    with pytest.raises(EmptyGroup):
        as_group([])
