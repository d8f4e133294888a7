"""Path helpers shared by the manifest builder and the packager."""

from __future__ import annotations

import stat
from pathlib import Path, PurePath
from typing import Literal

from vita_pack_vpk.errors import InvalidDestination, InvalidSource, NotFound

SourceKind = Literal["file", "dir"]


def normalize_destination(raw: str) -> str:
    """Return *raw* as a relative, forward-slash archive path.

    Backslashes become ``/``, leading slashes and empty or ``.`` segments are
    dropped. Parent references are rejected so nothing lands outside the
    archive root on extraction.
    """
    parts = [p for p in raw.replace("\\", "/").split("/") if p not in {"", "."}]
    if not parts:
        raise InvalidDestination(raw, "empty archive path")
    if ".." in parts:
        raise InvalidDestination(raw, "'..' segments are not allowed")
    path = "/".join(parts)
    try:
        path.encode("utf-8")
    except UnicodeEncodeError as exc:
        raise InvalidDestination(raw, "name is not valid UTF-8") from exc
    return path


def normalize_root(raw: str) -> str:
    """Like ``normalize_destination`` but ``/``, ``.`` or ``""`` mean the archive root."""
    if all(p in {"", "."} for p in raw.replace("\\", "/").split("/")):
        return ""
    return normalize_destination(raw)


def join_destination(root: str, relative: PurePath | str) -> str:
    rel = PurePath(relative).as_posix()
    return normalize_destination(f"{root}/{rel}")


def classify_source(path: Path) -> SourceKind:
    """Tell whether *path* is a regular file or a directory (symlinks followed)."""
    try:
        mode = path.stat().st_mode
    except FileNotFoundError as exc:
        raise NotFound(path) from exc
    except OSError as exc:
        raise NotFound(path, exc.strerror or str(exc)) from exc
    if stat.S_ISREG(mode):
        return "file"
    if stat.S_ISDIR(mode):
        return "dir"
    raise InvalidSource(path)
