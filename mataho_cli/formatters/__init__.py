"""Output formatting package for mataho-cli.

Re-exports all public names so consumers can do:
    from mataho_cli.formatters import format_devices_table
"""

from mataho_cli.formatters._core import mutation_response, output, pretty_print
from mataho_cli.formatters._devices import (
    format_device_detail,
    format_devices_table,
    format_exec_result,
)
from mataho_cli.formatters._groups import format_groups_table
from mataho_cli.formatters._table import _CONTROL_RE, _sanitize_str, _table, _trunc

__all__ = [
    "_CONTROL_RE",
    "_sanitize_str",
    "_table",
    "_trunc",
    "format_device_detail",
    "format_devices_table",
    "format_exec_result",
    "format_groups_table",
    "mutation_response",
    "output",
    "pretty_print",
]
