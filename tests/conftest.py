"""
Shared test fixtures for mataho-cli tests.
Resets runtime flags and provides a sample gateway setup plus a fake gateway api.
"""

import copy

import pytest

from mataho_cli import config
from mataho_cli.config import Configuration
from mataho_cli.groups import GroupStore
from mataho_cli.models import DeviceSnapshot

GARAGE = "io://1234-5678-9012/10001"
GATE = "io://1234-5678-9012/10002"
KITCHEN = "io://1234-5678-9012/10003"
KITCHENS = "io://1234-5678-9012/10004"
OFFICE = "io://1234-5678-9012/10005"


def _cmd(name, nparams=0, sig=None):
    command = {"commandName": name, "nparams": nparams}
    if sig:
        command["paramsSig"] = sig
    return command


SETUP_PAYLOAD = {
    "devices": [
        {
            "label": "Garage",
            "type": 1,
            "controllableName": "io:GarageOpenerIOComponent",
            "deviceURL": GARAGE,
            "enabled": True,
            "definition": {
                "commands": [_cmd("open"), _cmd("close"), _cmd("stop"), _cmd("setClosure", 1, "p1")]
            },
        },
        {
            "label": "Front Gate",
            "type": 1,
            "controllableName": "io:SlidingDiscreteGateOpenerIOComponent",
            "deviceURL": GATE,
            "enabled": True,
            "definition": {"commands": [_cmd("open"), _cmd("close"), _cmd("stop")]},
        },
        {
            "label": "Kitchen Shutter",
            "type": 1,
            "controllableName": "io:RollerShutterWithLowSpeedManagementIOComponent",
            "deviceURL": KITCHEN,
            "enabled": True,
            "definition": {"commands": [_cmd("open"), _cmd("close"), _cmd("my")]},
        },
        {
            "label": "Kitchen Shutters",
            "type": 1,
            "controllableName": "io:RollerShutterWithLowSpeedManagementIOComponent",
            "deviceURL": KITCHENS,
            "enabled": False,
            "definition": {"commands": [_cmd("open"), _cmd("close")]},
        },
        {
            "label": "Office Shutter",
            "type": 1,
            "controllableName": "io:RollerShutterWithLowSpeedManagementIOComponent",
            "deviceURL": OFFICE,
            "enabled": True,
            "definition": {"commands": [_cmd("open"), _cmd("stop")]},
        },
    ]
}


class FakeApi:
    """Stands in for GatewayApi; records every request."""

    def __init__(self, setup=None, error=None):
        self.setup = copy.deepcopy(SETUP_PAYLOAD if setup is None else setup)
        self.error = error
        self.setup_calls = 0
        self.applied = []

    def get_setup(self):
        self.setup_calls += 1
        return self.setup

    def apply(self, payload):
        if self.error is not None:
            raise self.error
        self.applied.append(payload)
        return {"execId": f"exec-{len(self.applied)}"}


@pytest.fixture(autouse=True)
def _isolate_config(monkeypatch, tmp_path):
    """Reset runtime flags and point the default config providers into tmp_path."""
    monkeypatch.setattr(config, "RUNTIME_QUIET", False)
    monkeypatch.setattr(config, "RUNTIME_VERBOSE", False)
    monkeypatch.setattr(config, "HTTP_LOG_ENABLED", False)
    monkeypatch.delenv("MATAHO_CONFIG_DIR", raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    monkeypatch.setenv("APPDATA", str(tmp_path / "appdata"))
    monkeypatch.setenv("HOME", str(tmp_path / "home"))


@pytest.fixture
def snapshot():
    return DeviceSnapshot.from_setup(copy.deepcopy(SETUP_PAYLOAD))


@pytest.fixture
def fake_api():
    return FakeApi()


@pytest.fixture
def groups_path(tmp_path):
    return tmp_path / "groups.json"


@pytest.fixture
def store(groups_path):
    return GroupStore.load(groups_path)


@pytest.fixture
def client(fake_api, store):
    from mataho_cli.client import MatahoClient

    return MatahoClient(
        configuration=Configuration(api_token="secret-token-123"), api=fake_api, store=store
    )
