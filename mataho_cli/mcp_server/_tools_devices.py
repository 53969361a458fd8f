"""Device tools: listing, detail, single-device exec (3 tools)."""

from __future__ import annotations

from typing import Literal

from mataho_cli.mcp_server._core import _call, _finalize_tool_result


def list_devices(
    type_filter: Literal["all", "garage-door", "gate", "roller-shutter"] = "all",
    long: bool = False,
) -> dict:
    """List gateway devices.

    Args:
        type_filter: Restrict to one device category.
        long: Include url, enabled flag and action names.

    Returns:
        Dict with devices (list of {id, label, type, ...}).
    """
    return _finalize_tool_result(
        _call("list_devices", type_filter=type_filter, long=long), "devices"
    )


def get_device(device: str, match_mode: Literal["exact", "fuzzy"] = "fuzzy") -> dict:
    """Get one device with its supported actions.

    Args:
        device: Device id (last URL segment) or label.
    """
    return _finalize_tool_result(_call("get_device", identifier=device, match_mode=match_mode))


def exec_device(
    device: str,
    action: str,
    params: list[str] | None = None,
    match_mode: Literal["exact", "fuzzy"] = "fuzzy",
) -> dict:
    """Execute an action (e.g. open, close, stop) on one device.

    Fails with type=unsupported_action if the device lacks the action, and
    type=ambiguous (with labels) if the label matches several devices.
    """
    return _finalize_tool_result(
        _call(
            "exec_device",
            identifier=device,
            action=action,
            params=params or [],
            match_mode=match_mode,
        )
    )


def register(mcp):
    """Register all device tools with the FastMCP instance."""
    mcp.tool()(list_devices)
    mcp.tool()(get_device)
    mcp.tool()(exec_device)
