"""Whole-file text reads and atomic writes for manifests."""

from __future__ import annotations

import os
import tempfile


def read_text(path: str) -> str:
    """Read a UTF-8 text file without newline translation."""
    with open(path, "r", encoding="utf-8", newline="") as f:
        return f.read()


def atomic_write(path: str, content: str) -> None:
    """Replace ``path`` with ``content`` atomically.

    The content goes to a temporary file in the same directory which is then
    renamed over the target, so the original is either fully replaced or left
    untouched. The original file mode is preserved.
    """
    directory = os.path.dirname(os.path.abspath(path))
    fd, tmp = tempfile.mkstemp(dir=directory, prefix=".depman-", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
            f.write(content)
        if os.path.exists(path):
            os.chmod(tmp, os.stat(path).st_mode & 0o777)
        os.replace(tmp, path)
    except Exception:
        try:
            os.unlink(tmp)
        except OSError:
            pass
        raise
