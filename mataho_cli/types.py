"""Typed response definitions for MatahoClient methods.

These TypedDicts document the shape of dicts returned by public API methods.
They are optional - runtime behavior is unchanged (plain dicts).
"""

from __future__ import annotations

from typing import TypedDict

# ---------------------------------------------------------------------------
# Device types
# ---------------------------------------------------------------------------


class DeviceRow(TypedDict, total=False):
    """Device summary returned by list_devices(); url/enabled/actions with long=True."""

    id: str
    label: str
    type: str
    url: str
    enabled: bool
    actions: list[str]


class ActionRow(TypedDict):
    name: str
    param_count: int
    param_signature: str | None
    display: str


class DeviceDetail(TypedDict):
    """Return type of MatahoClient.get_device()."""

    id: str
    label: str
    type: str
    url: str
    enabled: bool
    actions: list[ActionRow]


# ---------------------------------------------------------------------------
# Group types
# ---------------------------------------------------------------------------


class GroupMember(TypedDict):
    id: str
    label: str | None
    missing: bool


class GroupRow(TypedDict):
    id: str
    name: str
    members: list[GroupMember]


class GroupRecord(TypedDict):
    """Stored shape of a group in groups.json."""

    id: str
    name: str
    members: list[str]


# ---------------------------------------------------------------------------
# Mutation results
# ---------------------------------------------------------------------------


class GroupMutationResult(TypedDict, total=False):
    ok: bool
    action: str
    group: GroupRecord
    device: dict


class ExecResult(TypedDict):
    """Return type of exec_device() / exec_group()."""

    ok: bool
    action: str
    parameters: list[str]
    target: str
    device_ids: list[str]
    response: dict
