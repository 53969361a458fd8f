"""
Validate-then-send command dispatch to one device or a whole group.
"""

from mataho_cli.exceptions import CliError, UnsupportedActionError


def _action_entry(device, action, params):
    return {
        "deviceURL": device.url,
        "commands": [{"name": action, "parameters": list(params)}],
    }


def build_exec_payload(devices, action, params=(), group=False):
    """Build the /exec/apply body: one action entry per device."""
    devices = list(devices)
    if not group and len(devices) == 1:
        label = f"Exec {action} on {devices[0].url}"
    else:
        label = f"Exec {action} on {len(devices)} devices"
    return {
        "label": label,
        "actions": [_action_entry(d, action, params) for d in devices],
    }


class Dispatcher:
    """Checks capabilities, then forwards exactly one request to the gateway.

    The api only needs an ``apply(payload)`` method; its RemoteError
    propagates unchanged.
    """

    def __init__(self, api):
        self.api = api

    def execute(self, device, action, params=()):
        if not device.supports(action):
            raise UnsupportedActionError(
                f"[ERROR] Device '{device.label}' does not support the '{action}' action. "
                f"Available: {', '.join(device.action_names) or 'none'}",
                action=action,
                labels=[device.label],
            )
        payload = build_exec_payload([device], action, params)
        return self.api.apply(payload)

    def execute_group(self, group_name, devices, action, params=()):
        """All-or-nothing: every device must support *action* before any call."""
        devices = list(devices)
        if not devices:
            raise CliError(f"[ERROR] Group '{group_name}' has no devices.")
        lacking = [d.label for d in devices if not d.supports(action)]
        if lacking:
            raise UnsupportedActionError(
                f"[ERROR] The '{action}' action is not supported by every device in group "
                f"'{group_name}'. Unsupported: {', '.join(lacking)}",
                action=action,
                labels=lacking,
            )
        payload = build_exec_payload(devices, action, params, group=True)
        return self.api.apply(payload)
