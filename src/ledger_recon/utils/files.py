"""File helpers shared by the report writers."""

from pathlib import Path
from typing import Callable, IO
import os
import tempfile


def atomic_write(path: Path, write: Callable[[IO], None], mode: str = "w") -> Path:
    """
    Write a file through a temporary sibling and move it into place.

    Readers of ``path`` see either the previous file or the complete new one,
    never a partially written file.

    Args:
        path: Destination path
        write: Callable receiving the open temporary file handle
        mode: ``"w"`` for text or ``"wb"`` for binary content

    Returns:
        The destination path
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_path = tempfile.mkstemp(prefix=".tmp_", dir=str(path.parent))
    try:
        if "b" in mode:
            fh = os.fdopen(fd, mode)
        else:
            fh = os.fdopen(fd, mode, encoding="utf-8", newline="")
        with fh:
            write(fh)
        os.replace(tmp_path, str(path))
    finally:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)
    return path
