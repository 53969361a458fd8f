"""
Shared pure-utility functions for mataho-cli.

These helpers have no business logic. They are used across config.py,
groups.py and models.py.
"""

import os
import tempfile


def _get_field(d, snake, camel):
    """Get a value from a dict trying snake_case then camelCase key."""
    if snake in d:
        return d.get(snake)
    return d.get(camel)


def atomic_write_text(path, text):
    """Replace *path* with *text* via write-to-temp then rename.

    Readers either see the previous content or the new one, never a
    truncated file. Raises OSError on failure; the temp file is removed.
    """
    path = os.fspath(path)
    directory = os.path.dirname(path) or "."
    name = os.path.basename(path)
    fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=f".{name}_tmp_")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(text)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_path, path)
    except Exception:
        # Clean up temp file on any failure.
        try:
            os.remove(tmp_path)
        except OSError:
            pass
        raise
