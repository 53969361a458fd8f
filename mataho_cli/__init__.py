"""mataho-cli - CLI tool for home-automation gateway devices and device groups."""

from mataho_cli.client import MatahoClient
from mataho_cli.config import VERSION
from mataho_cli.exceptions import (
    AlreadyMemberError,
    AmbiguousMatchError,
    CliError,
    DuplicateNameError,
    NotFoundError,
    NotMemberError,
    PersistenceError,
    RemoteError,
    SetupError,
    UnsupportedActionError,
)
from mataho_cli.models import Action, Device, DeviceGroup, DeviceSnapshot, MatchMode
from mataho_cli.types import DeviceDetail, DeviceRow, ExecResult, GroupRow

__all__ = [
    "VERSION",
    "MatahoClient",
    "Action",
    "Device",
    "DeviceGroup",
    "DeviceSnapshot",
    "MatchMode",
    "CliError",
    "SetupError",
    "NotFoundError",
    "AmbiguousMatchError",
    "DuplicateNameError",
    "AlreadyMemberError",
    "NotMemberError",
    "UnsupportedActionError",
    "PersistenceError",
    "RemoteError",
    "DeviceDetail",
    "DeviceRow",
    "ExecResult",
    "GroupRow",
]
