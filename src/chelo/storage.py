"""JSON file helpers shared by the cache and the ratings output."""

from __future__ import annotations

import json
import os
import stat
import tempfile
from pathlib import Path
from typing import Any


def _target_mode(path: Path) -> int:
    """Mode for a replaced file: the old file's if there is one, else 0666 minus umask."""
    try:
        return stat.S_IMODE(path.stat().st_mode)
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask


def write_json_atomic(path: Path, payload: Any, *, sort_keys: bool = False) -> None:
    """
    Write ``payload`` as JSON to ``path`` via a temp file and rename.

    The payload is fully encoded before anything touches the disk, and the
    destination is replaced in one step, so a failure never leaves a
    half-written file behind. The result gets the permissions a plain
    ``open(path, "w")`` would have given it.

    Raises:
        TypeError / ValueError: If the payload can't be encoded
        OSError: If the file can't be written or renamed
    """
    text = json.dumps(payload, indent=2, sort_keys=sort_keys, ensure_ascii=False) + "\n"

    path.parent.mkdir(parents=True, exist_ok=True)
    mode = _target_mode(path)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(text)
        # mkstemp creates 0600
        os.chmod(tmp_name, mode)
        os.replace(tmp_name, path)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass
        raise
