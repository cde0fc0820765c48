from __future__ import annotations

"""Atomic group assembly with a deterministic group identity."""

import base64
import json
from enum import Enum
from typing import Iterable, List, Optional, Union

from .entities import MAX_GROUP_SIZE, TransactionGroup, TransactionRequest
from .errors import EmptyGroup, GroupSealed, GroupTooLarge
from .validation import sha512_256

_GROUP_DOMAIN_TAG = b"TG"


class GroupState(str, Enum):
    EMPTY = "empty"
    BUILDING = "building"
    SEALED = "sealed"


def _canonical_members(members: Iterable[TransactionRequest]) -> bytes:
    payloads = [member.to_payload() for member in members]
    return json.dumps(payloads, sort_keys=True, separators=(",", ":")).encode("utf-8")


def derive_group_id(members: Iterable[TransactionRequest]) -> str:
    """Identity of an ordered member list; equal sequences give equal ids.

    This is the caller-side key for recognising a resubmitted group. The
    ledger's own group id depends on fee and validity rounds and is assigned
    by the signer once suggested params are known.
    """

    digest = sha512_256(_GROUP_DOMAIN_TAG + _canonical_members(members))
    return base64.b64encode(digest).decode("ascii")


class AtomicGroupBuilder:
    """Collect requests (Empty -> Building) and seal them into one group.

    Size limits are enforced at ``seal()`` so an oversized group fails before
    any network call is made.
    """

    def __init__(self, *, max_size: int = MAX_GROUP_SIZE) -> None:
        if max_size < 1:
            raise ValueError("max_size must be at least 1")
        self.max_size = max_size
        self._members: List[TransactionRequest] = []
        self._sealed: Optional[TransactionGroup] = None

    @property
    def state(self) -> GroupState:
        if self._sealed is not None:
            return GroupState.SEALED
        if self._members:
            return GroupState.BUILDING
        return GroupState.EMPTY

    def add_member(self, request: TransactionRequest) -> "AtomicGroupBuilder":
        if self._sealed is not None:
            raise GroupSealed("Group is sealed; members can no longer change.")
        if not isinstance(request, TransactionRequest):
            raise TypeError("add_member expects a TransactionRequest")
        self._members.append(request)
        return self

    def extend(self, requests: Iterable[TransactionRequest]) -> "AtomicGroupBuilder":
        for request in requests:
            self.add_member(request)
        return self

    def seal(self) -> TransactionGroup:
        if self._sealed is not None:
            return self._sealed
        if not self._members:
            raise EmptyGroup("Cannot seal a group without members.")
        if len(self._members) > self.max_size:
            raise GroupTooLarge(
                f"Group has {len(self._members)} members; the ledger accepts at most {self.max_size}."
            )
        members = tuple(self._members)
        self._sealed = TransactionGroup(members=members, group_id=derive_group_id(members))
        return self._sealed

    def __len__(self) -> int:
        return len(self._members)


def single(request: TransactionRequest) -> TransactionGroup:
    """Seal one request as the degenerate group of size 1."""

    return AtomicGroupBuilder().add_member(request).seal()


def as_group(
    item: Union[TransactionRequest, TransactionGroup, Iterable[TransactionRequest]],
    *,
    max_size: int = MAX_GROUP_SIZE,
) -> TransactionGroup:
    """Return ``item`` as a sealed group no larger than ``max_size``.

    A lone request becomes a size-1 group; an iterable of requests is sealed
    in order through :class:`AtomicGroupBuilder`.
    """

    if isinstance(item, TransactionGroup):
        if len(item) > max_size:
            raise GroupTooLarge(f"Group has {len(item)} members; the ledger accepts at most {max_size}.")
        return item
    if isinstance(item, TransactionRequest):
        return single(item)
    return AtomicGroupBuilder(max_size=max_size).extend(item).seal()


__all__ = ["AtomicGroupBuilder", "GroupState", "as_group", "derive_group_id", "single"]
