"""MCP server exposing MatahoClient methods as tools.

Package structure:
  __init__.py        - FastMCP init, register() calls, re-exports
  __main__.py        - ``python -m mataho_cli.mcp_server`` entry point
  _core.py           - Client caching, _call dispatcher, response contract
  _tools_devices.py  - 3 device tools
  _tools_groups.py   - 6 group tools

Run: python -m mataho_cli.mcp_server
Requires: pip install .[mcp]
"""

from __future__ import annotations

from mcp.server.fastmcp import FastMCP

from mataho_cli.mcp_server import _tools_devices, _tools_groups

mcp = FastMCP(
    "mataho",
    instructions=(
        "Home-automation gateway tools (garage doors, gates, roller shutters). "
        "Devices are identified by id (last part of their URL) or label; labels "
        "match fuzzily unless match_mode='exact'. Call get_device to see which "
        "actions a device supports before exec_device. "
        "If a result has type='ambiguous', ask the user to pick one of 'labels'."
    ),
)

for _mod in [_tools_devices, _tools_groups]:
    _mod.register(mcp)

# ---------------------------------------------------------------------------
# Re-exports (tests import via mcp_mod.xxx)
# ---------------------------------------------------------------------------

from mataho_cli.mcp_server._core import (  # noqa: E402, F401
    _call,
    _contract_error,
    _finalize_tool_result,
    _get_client,
)
from mataho_cli.mcp_server._tools_devices import (  # noqa: E402, F401
    exec_device,
    get_device,
    list_devices,
)
from mataho_cli.mcp_server._tools_groups import (  # noqa: E402, F401
    add_to_group,
    create_group,
    delete_group,
    exec_group,
    list_groups,
    remove_from_group,
)


def main():
    """Run the MCP server (stdio transport)."""
    mcp.run()
