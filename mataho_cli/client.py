"""
MatahoClient - public Python API for the gateway devices and local groups.

Single entry point for the CLI and the MCP server.
All methods return flat dicts suitable for JSON serialization.
"""

from __future__ import annotations

from typing import Any

from mataho_cli import config
from mataho_cli.api import GatewayApi
from mataho_cli.dispatch import Dispatcher
from mataho_cli.exceptions import CliError, NotFoundError
from mataho_cli.groups import GroupStore
from mataho_cli.matching import resolve_device
from mataho_cli.models import DeviceSnapshot, DeviceTypeFilter, MatchMode

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _parse_enum(enum_cls, value, field_name):
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value).strip().lower())
    except ValueError:
        valid = ", ".join(e.value for e in enum_cls)
        raise CliError(f"[ERROR] Invalid {field_name} '{value}'. Valid: {valid}") from None


def _device_row(device, long=False):
    row = {"id": device.id, "label": device.label, "type": device.type}
    if long:
        row["url"] = device.url
        row["enabled"] = device.enabled
        row["actions"] = device.action_names
    return row


def _action_row(action):
    return {
        "name": action.name,
        "param_count": action.param_count,
        "param_signature": action.param_signature,
        "display": str(action),
    }


def _group_row(group, snapshot=None):
    members = []
    for device_id in group.members:
        device = snapshot.by_id(device_id) if snapshot is not None else None
        members.append(
            {
                "id": device_id,
                "label": device.label if device else None,
                "missing": snapshot is not None and device is None,
            }
        )
    return {"id": group.id, "name": group.name, "members": members}


class MatahoClient:
    """Wires the device snapshot, group store and dispatcher together.

    Args:
        providers: ordered config-dir location providers, see
            config.find_config_dir(). Defaults to config.default_providers().
        configuration / api / store: injected collaborators, mainly for tests.
    """

    def __init__(self, *, providers=None, configuration=None, api=None, store=None):
        config_dir = None
        if configuration is None or store is None:
            config_dir = config.find_config_dir(providers or config.default_providers())
        if configuration is None:
            configuration = config.load_config(config_dir / config.CONFIG_FILENAME)
        if store is None:
            store = GroupStore.load(
                config_dir / config.GROUPS_FILENAME, seed=configuration.groups
            )
        self.configuration = configuration
        self.api = api if api is not None else GatewayApi(configuration)
        self.store = store
        self.dispatcher = Dispatcher(self.api)
        self._snapshot: DeviceSnapshot | None = None

    @property
    def snapshot(self) -> DeviceSnapshot:
        """Device list, fetched from the gateway once per client."""
        if self._snapshot is None:
            self._snapshot = DeviceSnapshot.from_setup(self.api.get_setup())
        return self._snapshot

    def _find_device(self, identifier, match_mode):
        mode = _parse_enum(MatchMode, match_mode, "match mode")
        return resolve_device(identifier, mode, self.snapshot)

    def _group_devices(self, group):
        devices = []
        for device_id in group.members:
            device = self.snapshot.by_id(device_id)
            if device is None:
                raise NotFoundError(
                    f"[ERROR] Group '{group.name}' references device '{device_id}', which is "
                    "not in the current setup.\n"
                    f"  Remove it with: mataho group leave '{group.name}' {device_id}"
                )
            devices.append(device)
        return devices

    # -------------------------------------------------------------------
    # Devices
    # -------------------------------------------------------------------

    def list_devices(self, *, type_filter: str = "all", long: bool = False) -> list[dict[str, Any]]:
        flt = _parse_enum(DeviceTypeFilter, type_filter, "filter")
        return [_device_row(d, long=long) for d in self.snapshot.filter(flt)]

    def get_device(self, identifier: str, *, match_mode: str = "fuzzy") -> dict[str, Any]:
        device = self._find_device(identifier, match_mode)
        row = _device_row(device, long=True)
        row["actions"] = [_action_row(a) for a in device.actions]
        return row

    def exec_device(
        self,
        identifier: str,
        action: str,
        params: list[str] | None = None,
        *,
        match_mode: str = "fuzzy",
    ) -> dict[str, Any]:
        device = self._find_device(identifier, match_mode)
        result = self.dispatcher.execute(device, action, params or [])
        return {
            "ok": True,
            "action": action,
            "parameters": list(params or []),
            "target": device.label,
            "device_ids": [device.id],
            "response": result or {},
        }

    # -------------------------------------------------------------------
    # Groups
    # -------------------------------------------------------------------

    def list_groups(self, *, resolve_labels: bool = True) -> list[dict[str, Any]]:
        snapshot = self.snapshot if resolve_labels else None
        rows = [_group_row(g, snapshot) for g in self.store.groups]
        for row in rows:
            missing = [m["id"] for m in row["members"] if m["missing"]]
            if missing:
                config.warn(
                    f"Group '{row['name']}' references devices not in the current setup: "
                    + ", ".join(missing)
                )
        return rows

    def create_group(self, name: str) -> dict[str, Any]:
        group = self.store.create(name)
        return {"ok": True, "action": "created", "group": group.to_dict()}

    def delete_group(self, name: str) -> dict[str, Any]:
        group = self.store.delete(name)
        return {"ok": True, "action": "deleted", "group": group.to_dict()}

    def add_to_group(
        self, group: str, identifier: str, *, match_mode: str = "fuzzy"
    ) -> dict[str, Any]:
        mode = _parse_enum(MatchMode, match_mode, "match mode")
        updated, device = self.store.add_member(group, identifier, self.snapshot, mode)
        return {
            "ok": True,
            "action": "joined",
            "group": updated.to_dict(),
            "device": {"id": device.id, "label": device.label},
        }

    def remove_from_group(
        self, group: str, identifier: str, *, match_mode: str = "fuzzy"
    ) -> dict[str, Any]:
        mode = _parse_enum(MatchMode, match_mode, "match mode")
        updated, device = self.store.remove_member(group, identifier, self.snapshot, mode)
        return {
            "ok": True,
            "action": "left",
            "group": updated.to_dict(),
            "device": {
                "id": device.id if device else identifier,
                "label": device.label if device else None,
            },
        }

    def exec_group(
        self, group: str, action: str, params: list[str] | None = None
    ) -> dict[str, Any]:
        target = self.store.get(group)
        devices = self._group_devices(target)
        result = self.dispatcher.execute_group(target.name, devices, action, params or [])
        return {
            "ok": True,
            "action": action,
            "parameters": list(params or []),
            "target": target.name,
            "device_ids": [d.id for d in devices],
            "response": result or {},
        }
