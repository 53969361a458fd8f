"""Group tools: CRUD, membership and group exec (6 tools)."""

from __future__ import annotations

from mataho_cli.mcp_server._core import _call, _finalize_tool_result


def list_groups() -> dict:
    """List device groups with their members (missing=true for stale ids)."""
    return _finalize_tool_result(_call("list_groups"), "groups")


def create_group(name: str) -> dict:
    """Create an empty group. Names are unique (case-sensitive)."""
    return _finalize_tool_result(_call("create_group", name=name))


def delete_group(name: str) -> dict:
    return _finalize_tool_result(_call("delete_group", name=name))


def add_to_group(group: str, device: str) -> dict:
    """Add a device (id or label) to a group."""
    return _finalize_tool_result(_call("add_to_group", group=group, identifier=device))


def remove_from_group(group: str, device: str) -> dict:
    """Remove a device (id or label) from a group."""
    return _finalize_tool_result(_call("remove_from_group", group=group, identifier=device))


def exec_group(group: str, action: str, params: list[str] | None = None) -> dict:
    """Execute an action on every device of a group in one request.

    All-or-nothing: if any device lacks the action nothing is sent.
    """
    return _finalize_tool_result(
        _call("exec_group", group=group, action=action, params=params or [])
    )


def register(mcp):
    """Register all group tools with the FastMCP instance."""
    mcp.tool()(list_groups)
    mcp.tool()(create_group)
    mcp.tool()(delete_group)
    mcp.tool()(add_to_group)
    mcp.tool()(remove_from_group)
    mcp.tool()(exec_group)
