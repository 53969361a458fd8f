"""
Command implementations for mataho-cli.
Each cmd_*() function receives an argparse.Namespace and handles one CLI command.

Business logic lives in client.py (MatahoClient), injected by cli.main() as
``ns.client``. These thin wrappers handle argparse → keyword args, format
selection, and formatter dispatch.
"""

from mataho_cli.formatters import (
    format_device_detail,
    format_devices_table,
    format_exec_result,
    format_groups_table,
    mutation_response,
    output,
)

# ---------------------------------------------------------------------------
# Device commands
# ---------------------------------------------------------------------------


def cmd_list(ns):
    devices = ns.client.list_devices(type_filter=ns.filter, long=ns.long_listing)
    output(devices, format_devices_table, ns.format)


def cmd_info(ns):
    device = ns.client.get_device(ns.device, match_mode=ns.match_mode)
    output(device, format_device_detail, ns.format)


def cmd_exec(ns):
    result = ns.client.exec_device(ns.device, ns.action, ns.args, match_mode=ns.match_mode)
    output(result, format_exec_result, ns.format)


# ---------------------------------------------------------------------------
# Group commands
# ---------------------------------------------------------------------------


def cmd_group_list(ns):
    output(ns.client.list_groups(), format_groups_table, ns.format)


def cmd_group_create(ns):
    result = ns.client.create_group(ns.name)
    mutation_response(f"Created group '{result['group']['name']}'", result, ns.format)


def cmd_group_delete(ns):
    result = ns.client.delete_group(ns.name)
    mutation_response(f"Deleted group '{result['group']['name']}'", result, ns.format)


def cmd_group_join(ns):
    result = ns.client.add_to_group(ns.group, ns.device, match_mode=ns.match_mode)
    device = result["device"]
    mutation_response(
        f"Added '{device['label']}' ({device['id']}) to group '{result['group']['name']}'",
        result,
        ns.format,
    )


def cmd_group_leave(ns):
    result = ns.client.remove_from_group(ns.group, ns.device, match_mode=ns.match_mode)
    device = result["device"]
    name = f"'{device['label']}' ({device['id']})" if device["label"] else device["id"]
    mutation_response(
        f"Removed {name} from group '{result['group']['name']}'",
        result,
        ns.format,
    )


def cmd_group_exec(ns):
    result = ns.client.exec_group(ns.group, ns.action, ns.args)
    output(result, format_exec_result, ns.format)
