"""Vpk packaging: write a resolved manifest into a zip container.

Records are stored (no deflate), marked as unix regular files with mode
0755, and stamped 1980-01-01 so the same inputs always yield the same bytes.
Entries are written strictly in manifest order, one source file in memory at
a time.
"""

from __future__ import annotations

import stat
import zipfile
from collections.abc import Iterable
from pathlib import Path

from vita_pack_vpk.errors import CannotCreate, ContainerWriteFailure, SourceUnreadable
from vita_pack_vpk.logging import get_logger
from vita_pack_vpk.manifest import collapse_duplicates
from vita_pack_vpk.types import Entry

DEFAULT_OUTPUT_FILE = "output.vpk"
ENTRY_MODE = 0o755
ENTRY_DATE_TIME = (1980, 1, 1, 0, 0, 0)
_CREATE_SYSTEM_UNIX = 3

log = get_logger(__name__)


def _zipinfo(destination: str) -> zipfile.ZipInfo:
    info = zipfile.ZipInfo(destination, date_time=ENTRY_DATE_TIME)
    info.compress_type = zipfile.ZIP_STORED
    info.create_system = _CREATE_SYSTEM_UNIX
    info.external_attr = (stat.S_IFREG | ENTRY_MODE) << 16
    return info


def _read_source(path: Path) -> bytes:
    try:
        with open(path, "rb") as f:
            return f.read()
    except OSError as exc:
        raise SourceUnreadable(path, exc) from exc


def pack_vpk(entries: Iterable[Entry], vpk_path: Path) -> Path:
    """Create *vpk_path* holding every entry, in order.

    Destinations seen more than once keep the last declared source. On failure
    the partially written file is left in place.
    """
    vpk_path = Path(vpk_path)
    ordered = collapse_duplicates(entries)

    try:
        handle = open(vpk_path, "wb")
    except OSError as exc:
        raise CannotCreate(vpk_path, exc) from exc

    with handle:
        try:
            with zipfile.ZipFile(handle, "w", compression=zipfile.ZIP_STORED) as vpk:
                for entry in ordered:
                    buf = _read_source(entry.source)
                    vpk.writestr(_zipinfo(entry.destination), buf)
                    log.debug(
                        "Packed %s -> %s (%d bytes)",
                        entry.source,
                        entry.destination,
                        len(buf),
                        extra={"source": entry.source, "destination": entry.destination},
                    )
                    del buf
        except (OSError, ValueError, zipfile.BadZipFile, zipfile.LargeZipFile) as exc:
            raise ContainerWriteFailure(vpk_path, exc) from exc

    log.info("Wrote %s with %d entries", vpk_path, len(ordered), extra={"output": vpk_path})
    return vpk_path
