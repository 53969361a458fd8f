"""Tests for MCP server tool wrappers.

Mocks at MatahoClient level. Verifies each tool calls the correct
client method and that errors are converted to dicts.
"""

import pytest

mcp_mod = pytest.importorskip("mataho_cli.mcp_server", reason="mcp package not installed")

import importlib  # noqa: E402
from unittest.mock import MagicMock, patch  # noqa: E402

from mataho_cli.exceptions import (  # noqa: E402
    AmbiguousMatchError,
    NotFoundError,
    SetupError,
    UnsupportedActionError,
)

_core = importlib.import_module("mataho_cli.mcp_server._core")


@pytest.fixture(autouse=True)
def _reset_client_cache():
    """Reset the cached MatahoClient between tests."""
    _core._client = None
    yield
    _core._client = None


def _mock_client(**method_returns):
    client = MagicMock()
    for name, val in method_returns.items():
        getattr(client, name).return_value = val
    return client


class TestDeviceTools:
    @patch("mataho_cli.mcp_server._core.MatahoClient")
    def test_list_devices_wrapped(self, MockClient):
        client = _mock_client(list_devices=[{"id": "10001"}])
        MockClient.return_value = client
        result = mcp_mod.list_devices(type_filter="gate", long=True)
        assert result == {"ok": True, "devices": [{"id": "10001"}]}
        client.list_devices.assert_called_once_with(type_filter="gate", long=True)

    @patch("mataho_cli.mcp_server._core.MatahoClient")
    def test_get_device(self, MockClient):
        client = _mock_client(get_device={"id": "10001", "label": "Garage"})
        MockClient.return_value = client
        result = mcp_mod.get_device("garage", match_mode="exact")
        assert result["ok"] is True
        assert result["label"] == "Garage"
        client.get_device.assert_called_once_with(identifier="garage", match_mode="exact")

    @patch("mataho_cli.mcp_server._core.MatahoClient")
    def test_exec_device_defaults_params(self, MockClient):
        client = _mock_client(exec_device={"ok": True, "action": "open"})
        MockClient.return_value = client
        mcp_mod.exec_device("garage", "open")
        client.exec_device.assert_called_once_with(
            identifier="garage", action="open", params=[], match_mode="fuzzy"
        )

    @patch("mataho_cli.mcp_server._core.MatahoClient")
    def test_ambiguous_returns_labels(self, MockClient):
        client = MagicMock()
        client.exec_device.side_effect = AmbiguousMatchError("tie", labels=["A", "B"])
        MockClient.return_value = client
        result = mcp_mod.exec_device("kitchen", "open")
        assert result == {"ok": False, "type": "ambiguous", "error": "tie", "labels": ["A", "B"]}


class TestGroupTools:
    @patch("mataho_cli.mcp_server._core.MatahoClient")
    def test_list_groups_wrapped(self, MockClient):
        MockClient.return_value = _mock_client(list_groups=[])
        assert mcp_mod.list_groups() == {"ok": True, "groups": []}

    @patch("mataho_cli.mcp_server._core.MatahoClient")
    def test_add_to_group(self, MockClient):
        client = _mock_client(add_to_group={"ok": True, "action": "joined"})
        MockClient.return_value = client
        mcp_mod.add_to_group("doors", "garage")
        client.add_to_group.assert_called_once_with(group="doors", identifier="garage")

    @patch("mataho_cli.mcp_server._core.MatahoClient")
    def test_exec_group_unsupported(self, MockClient):
        client = MagicMock()
        client.exec_group.side_effect = UnsupportedActionError(
            "nope", action="close", labels=["Office Shutter"]
        )
        MockClient.return_value = client
        result = mcp_mod.exec_group("mixed", "close")
        assert result["type"] == "unsupported_action"
        assert result["labels"] == ["Office Shutter"]

    @patch("mataho_cli.mcp_server._core.MatahoClient")
    def test_delete_missing_group(self, MockClient):
        client = MagicMock()
        client.delete_group.side_effect = NotFoundError("No such group")
        MockClient.return_value = client
        result = mcp_mod.delete_group("nope")
        assert result == {"ok": False, "type": "not_found", "error": "No such group"}


class TestCore:
    @patch("mataho_cli.mcp_server._core.MatahoClient")
    def test_setup_error(self, MockClient):
        MockClient.side_effect = SetupError("[SETUP_NEEDED] no config")
        result = mcp_mod.list_groups()
        assert result["ok"] is False
        assert result["type"] == "setup"

    @patch("mataho_cli.mcp_server._core.MatahoClient")
    def test_unexpected_error(self, MockClient):
        client = MagicMock()
        client.list_devices.side_effect = RuntimeError("kaput")
        MockClient.return_value = client
        result = mcp_mod.list_devices()
        assert result["error"] == "Unexpected error: kaput"

    def test_unknown_method(self):
        assert _core._call("save_config")["ok"] is False

    @patch("mataho_cli.mcp_server._core.MatahoClient")
    def test_client_cached(self, MockClient):
        MockClient.return_value = _mock_client(list_groups=[])
        mcp_mod.list_groups()
        mcp_mod.list_groups()
        assert MockClient.call_count == 1
