"""
Typed models for the device snapshot, capabilities and device groups.
"""

import uuid
from dataclasses import dataclass, field, replace
from enum import Enum

from mataho_cli._utils import _get_field
from mataho_cli.exceptions import AlreadyMemberError, CliError, NotMemberError, RemoteError


class MatchMode(Enum):
    """Whether label resolution may fall back to fuzzy scoring."""

    EXACT = "exact"
    FUZZY = "fuzzy"


class DeviceTypeFilter(Enum):
    ALL = "all"
    GARAGE_DOOR = "garage-door"
    GATE = "gate"
    ROLLER_SHUTTER = "roller-shutter"

    @property
    def controllable_name(self):
        return _CONTROLLABLE_NAMES.get(self, "")


_CONTROLLABLE_NAMES = {
    DeviceTypeFilter.GARAGE_DOOR: "io:GarageOpenerIOComponent",
    DeviceTypeFilter.GATE: "io:SlidingDiscreteGateOpenerIOComponent",
    DeviceTypeFilter.ROLLER_SHUTTER: "io:RollerShutterWithLowSpeedManagementIOComponent",
}


# ---------------------------------------------------------------------------
# Capability model
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Action:
    """One command a device declares support for."""

    name: str
    param_count: int = 0
    param_signature: str | None = None

    @classmethod
    def from_value(cls, value):
        if not isinstance(value, dict) or not _get_field(value, "name", "commandName"):
            raise RemoteError(f"[ERROR] Unexpected command definition in setup response: {value!r}")
        try:
            count = int(_get_field(value, "param_count", "nparams") or 0)
        except (TypeError, ValueError):
            count = 0
        return cls(
            name=str(_get_field(value, "name", "commandName")),
            param_count=count,
            param_signature=_get_field(value, "param_signature", "paramsSig"),
        )

    def __str__(self):
        if self.param_signature:
            return f"{self.name}: [{self.param_signature}] ({self.param_count})"
        return self.name


# ---------------------------------------------------------------------------
# Devices
# ---------------------------------------------------------------------------


def device_id_from_url(url):
    """Canonical device id: the last '/'-separated segment of the URL."""
    return url.rsplit("/", 1)[-1]


@dataclass(frozen=True)
class Device:
    label: str
    type: str
    url: str
    enabled: bool = True
    actions: tuple[Action, ...] = ()

    @property
    def id(self):
        return device_id_from_url(self.url)

    @property
    def action_names(self):
        return [a.name for a in self.actions]

    def supports(self, action_name):
        return any(a.name == action_name for a in self.actions)

    def matches(self, type_filter):
        if type_filter is DeviceTypeFilter.ALL:
            return True
        return self.type == type_filter.controllable_name

    @classmethod
    def from_value(cls, value):
        """Build a Device from one entry of the gateway's setup response."""
        if not isinstance(value, dict):
            raise RemoteError(
                f"[ERROR] Unexpected device entry in setup response: got {type(value).__name__}."
            )
        url = _get_field(value, "url", "deviceURL")
        if not url:
            raise RemoteError("[ERROR] Device entry in setup response has no deviceURL.")
        # "type" on gateway records is a numeric product type, not the controllable name.
        kind = value.get("controllableName")
        if not kind and isinstance(value.get("type"), str):
            kind = value["type"]
        definition = value.get("definition") or {}
        commands = definition.get("commands") if isinstance(definition, dict) else None
        return cls(
            label=str(value.get("label") or ""),
            type=str(kind or ""),
            url=str(url),
            enabled=bool(value.get("enabled", True)),
            actions=tuple(Action.from_value(c) for c in commands or []),
        )

    def __str__(self):
        return f"{self.id}: {self.label} ({self.type})"


@dataclass(frozen=True)
class DeviceSnapshot:
    """Immutable device list fetched once per run."""

    devices: tuple[Device, ...] = ()

    @classmethod
    def from_setup(cls, payload):
        if not isinstance(payload, dict) or not isinstance(payload.get("devices"), list):
            raise RemoteError("[ERROR] Unexpected setup response shape: missing 'devices' list.")
        return cls(devices=tuple(Device.from_value(d) for d in payload["devices"]))

    def __iter__(self):
        return iter(self.devices)

    def __len__(self):
        return len(self.devices)

    def by_id(self, device_id):
        for device in self.devices:
            if device.id == device_id:
                return device
        return None

    def filter(self, type_filter=DeviceTypeFilter.ALL):
        return [d for d in self.devices if d.matches(type_filter)]


# ---------------------------------------------------------------------------
# Groups
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DeviceGroup:
    """A named, ordered set of device ids. Mutators return new groups."""

    id: str
    name: str
    members: tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def new(cls, name):
        return cls(id=str(uuid.uuid4()), name=name)

    @classmethod
    def from_value(cls, value):
        """Parse one stored group record. Accepts the legacy 'devices' key."""
        if not isinstance(value, dict):
            raise CliError(
                f"[ERROR] Invalid group record: expected object, got {type(value).__name__}."
            )
        gid, name = value.get("id"), value.get("name")
        members = value.get("members", value.get("devices", []))
        if not isinstance(gid, str) or not isinstance(name, str) or not isinstance(members, list):
            raise CliError(f"[ERROR] Invalid group record: {value!r}")
        if not all(isinstance(m, str) for m in members):
            raise CliError(f"[ERROR] Invalid member ids in group '{name}'.")
        return cls(id=gid, name=name, members=tuple(dict.fromkeys(members)))

    def to_dict(self):
        return {"id": self.id, "name": self.name, "members": list(self.members)}

    def has_member(self, device_id):
        return device_id in self.members

    def with_member(self, device_id):
        if self.has_member(device_id):
            raise AlreadyMemberError(
                f"[ERROR] Device '{device_id}' is already in group '{self.name}'."
            )
        return replace(self, members=self.members + (device_id,))

    def without_member(self, device_id):
        if not self.has_member(device_id):
            raise NotMemberError(f"[ERROR] Device '{device_id}' is not in group '{self.name}'.")
        return replace(self, members=tuple(m for m in self.members if m != device_id))
