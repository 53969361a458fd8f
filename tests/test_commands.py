"""Tests for commands.py: thin cmd_* wrappers over MatahoClient."""

import argparse
import json
from unittest.mock import MagicMock

from mataho_cli.commands import cmd_group_leave, cmd_info, cmd_list


def _ns(fmt="table", **kwargs):
    return argparse.Namespace(format=fmt, client=MagicMock(), **kwargs)


class TestDeviceCommands:
    def test_list_passes_flags(self, capsys):
        ns = _ns(filter="gate", long_listing=False)
        ns.client.list_devices.return_value = [{"id": "2", "label": "Gate", "type": "t"}]
        cmd_list(ns)
        ns.client.list_devices.assert_called_once_with(type_filter="gate", long=False)
        assert capsys.readouterr().out == "2: Gate (t)\n"

    def test_info_json(self, capsys):
        ns = _ns(fmt="json", device="gate", match_mode="exact")
        ns.client.get_device.return_value = {"id": "2", "actions": []}
        cmd_info(ns)
        ns.client.get_device.assert_called_once_with("gate", match_mode="exact")
        assert json.loads(capsys.readouterr().out) == {"id": "2", "actions": []}


class TestGroupLeave:
    def test_known_device(self, capsys):
        ns = _ns(group="doors", device="garage", match_mode="fuzzy")
        ns.client.remove_from_group.return_value = {
            "ok": True,
            "group": {"name": "doors"},
            "device": {"id": "10001", "label": "Garage"},
        }
        cmd_group_leave(ns)
        assert capsys.readouterr().out == "OK: Removed 'Garage' (10001) from group 'doors'\n"

    def test_stale_device(self, capsys):
        ns = _ns(group="doors", device="55555", match_mode="fuzzy")
        ns.client.remove_from_group.return_value = {
            "ok": True,
            "group": {"name": "doors"},
            "device": {"id": "55555", "label": None},
        }
        cmd_group_leave(ns)
        assert capsys.readouterr().out == "OK: Removed 55555 from group 'doors'\n"
