"""Device formatters: listing, long listing, detail."""

from mataho_cli.formatters._table import _sanitize_str, _table, _trunc


def format_devices_table(devices):
    """Format device rows from MatahoClient.list_devices().

    Rows carrying "url" (long listing) get the extra columns.
    """
    if not devices:
        return "No devices found."
    if any("url" in d for d in devices):
        cols = [("ID", 12), ("Label", 26), ("Type", 44), ("On", 3), ("Actions", 0)]
        rows = [
            (
                d.get("id", ""),
                d.get("label", ""),
                d.get("type", ""),
                "yes" if d.get("enabled") else "no",
                ", ".join(d.get("actions", [])) or "-",
            )
            for d in devices
        ]
        lines = [_table(cols, rows, f"Total: {len(devices)} devices")]
        lines.append("")
        lines.extend(f"{d.get('id', '')}  {d.get('url', '')}" for d in devices)
        return "\n".join(lines)
    # Short form matches the classic `id: label (type)` listing.
    return "\n".join(
        f"{d.get('id', '')}: {_sanitize_str(d.get('label', ''))} ({d.get('type', '')})"
        for d in devices
    )


def format_device_detail(device):
    if not device:
        return "Device not found."
    lines = [
        f"- label: {_sanitize_str(device.get('label', ''))}",
        f"- url: {device.get('url', '')}",
        f"- id: {device.get('id', '')} (last part of URL)",
        f"- type: {device.get('type', '')}",
        f"- enabled: {'yes' if device.get('enabled') else 'no'}",
        "- actions:",
    ]
    actions = device.get("actions") or []
    if not actions:
        lines.append("\t- none")
    for action in actions:
        lines.append(f"\t- {_trunc(action.get('display') or action.get('name', ''), 120)}")
    return "\n".join(lines)


def format_exec_result(result):
    count = len(result.get("device_ids", []))
    suffix = f" ({count} devices)" if count > 1 else ""
    params = result.get("parameters") or []
    args = f" {' '.join(params)}" if params else ""
    target = result.get("target", "")
    return f"Executing `{result.get('action', '')}{args}` on `{target}`{suffix}..."
