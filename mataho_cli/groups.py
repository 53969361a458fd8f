"""
Durable store for user-defined device groups.

The whole collection lives in one JSON file that is rewritten on every
mutation (write-to-temp then rename). Each mutation builds the new
collection first, persists it, and only then swaps it in memory, so a
failed write leaves both the file and the store untouched.

There is no locking: two invocations mutating groups at the same time race,
and the later write wins.
"""

import json
from pathlib import Path

from mataho_cli import config
from mataho_cli._utils import atomic_write_text
from mataho_cli.exceptions import CliError, DuplicateNameError, NotFoundError, PersistenceError
from mataho_cli.matching import resolve_device, resolve_group
from mataho_cli.models import DeviceGroup, MatchMode


def _parse_groups(raw, source):
    if not isinstance(raw, list):
        raise CliError(f"[ERROR] Expected a list of groups, got {type(raw).__name__}.")
    groups = {}
    for item in raw:
        group = DeviceGroup.from_value(item)
        if group.name in groups:
            config.warn(
                f"Duplicate group name '{group.name}' in {source}; keeping the first "
                f"record and ignoring {group.id}. The ignored record will be removed "
                "from the file on the next group change."
            )
            continue
        groups[group.name] = group
    return list(groups.values())


class GroupStore:
    def __init__(self, path, groups=()):
        self.path = Path(path)
        self._groups = list(groups)

    # -- loading / persistence ---------------------------------------------

    @classmethod
    def load(cls, path, seed=None):
        """Read the groups file; never fails.

        A missing file yields *seed* (the initial group set from the config,
        if any) or an empty store. Unreadable or malformed content is
        reported as a warning and yields an empty store. Records repeating a
        group name are skipped with a warning, the first one is kept.
        """
        path = Path(path)
        if not path.exists():
            groups = []
            if seed:
                try:
                    groups = _parse_groups(seed, "config groups")
                except CliError as e:
                    config.warn(f"Ignoring initial groups from config: {e}")
            return cls(path, groups)
        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
            groups = _parse_groups(raw, path)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError, CliError) as e:
            config.warn(
                f"Could not load groups from {path} ({e}); starting with no groups. "
                "The next group change will overwrite this file."
            )
            groups = []
        return cls(path, groups)

    def _persist(self, groups):
        payload = json.dumps([g.to_dict() for g in groups], indent=2) + "\n"
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            atomic_write_text(self.path, payload)
        except OSError as e:
            raise PersistenceError(f"[ERROR] Failed to save groups to {self.path}: {e}") from e

    def _commit(self, groups):
        self._persist(groups)
        self._groups = groups

    def persist(self):
        """Rewrite the backing file from the current in-memory collection."""
        self._persist(self._groups)

    # -- queries -----------------------------------------------------------

    @property
    def groups(self):
        return list(self._groups)

    def __len__(self):
        return len(self._groups)

    def get(self, name):
        """Return the group named *name* (or with that id); NotFoundError otherwise."""
        try:
            return resolve_group(name, self._groups)
        except NotFoundError:
            raise NotFoundError(f"[ERROR] No such group: '{name}'.") from None

    def _replace(self, old, new):
        return [new if g.id == old.id else g for g in self._groups]

    # -- mutations ---------------------------------------------------------

    def create(self, name):
        name = (name or "").strip()
        if not name:
            raise CliError("[ERROR] Group name cannot be empty.")
        if any(g.name == name for g in self._groups):
            raise DuplicateNameError(f"[ERROR] A group named '{name}' already exists.")
        group = DeviceGroup.new(name)
        self._commit(self._groups + [group])
        return group

    def delete(self, name):
        group = self.get(name)
        self._commit([g for g in self._groups if g.id != group.id])
        return group

    def add_member(self, group_name, device_identifier, devices, mode=MatchMode.FUZZY):
        """Resolve a device against *devices* and append it to the group."""
        group = self.get(group_name)
        device = resolve_device(device_identifier, mode, devices)
        updated = group.with_member(device.id)
        self._commit(self._replace(group, updated))
        return updated, device

    def remove_member(self, group_name, device_identifier, devices, mode=MatchMode.FUZZY):
        """Remove a device from the group.

        Returns (group, device) where device is None when the identifier was
        a stored member id no longer present in *devices*.
        """
        group = self.get(group_name)
        device = None
        if group.has_member(device_identifier) and not any(
            d.id == device_identifier for d in devices
        ):
            device_id = device_identifier
        else:
            device = resolve_device(device_identifier, mode, devices)
            device_id = device.id
        updated = group.without_member(device_id)
        self._commit(self._replace(group, updated))
        return updated, device
