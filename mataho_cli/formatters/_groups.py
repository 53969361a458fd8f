"""Group formatters."""

from mataho_cli.formatters._table import _sanitize_str


def format_groups_table(groups):
    """Format group rows from MatahoClient.list_groups()."""
    if not groups:
        return "No groups defined. Create one with: mataho group create <name>"
    lines = []
    for group in groups:
        members = group.get("members", [])
        lines.append(f"Group: {_sanitize_str(group.get('name', ''))}  (ID: {group.get('id', '')})")
        if not members:
            lines.append("  (no devices)")
        for member in members:
            if member.get("missing"):
                lines.append(f"  - {member['id']} (missing)")
            elif member.get("label"):
                lines.append(f"  - {member['id']}: {_sanitize_str(member['label'])}")
            else:
                lines.append(f"  - {member['id']}")
        lines.append("")
    return "\n".join(lines).rstrip()
