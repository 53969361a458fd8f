"""Low-level table rendering helpers (stdlib only)."""

import re

_CONTROL_RE = re.compile(r"\x1b\[[0-9;]*[A-Za-z]|[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")


def _trunc(s, maxlen):
    """Truncate string with ellipsis indicator."""
    if not s:
        return ""
    return s[: maxlen - 1] + "…" if len(s) > maxlen else s


def _sanitize_str(s):
    """Strip ANSI escapes and control chars; labels come from the gateway."""
    if not s:
        return s
    return _CONTROL_RE.sub("", str(s))


def _table(columns, rows, footer=None):
    """Build a left-aligned text table.

    columns: list of (name, width) tuples; the last column is not padded.
    Cells wider than their column are truncated.
    """
    last = len(columns) - 1

    def _line(cells):
        out = []
        for i, cell in enumerate(cells):
            text = _sanitize_str(cell) if isinstance(cell, str) else str(cell)
            if i == last:
                out.append(text)
            else:
                width = columns[i][1]
                out.append(f"{_trunc(text, width):<{width}}")
        return " ".join(out).rstrip()

    header = _line([name for name, _ in columns])
    lines = [header, "-" * max(len(header), 60)]
    lines.extend(_line(row) for row in rows)
    if footer:
        lines.append(f"\n{footer}")
    return "\n".join(lines)
