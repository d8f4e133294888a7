"""Manifest resolution: declared inputs -> ordered vpk entries.

The manifest always opens with the two mandatory records a Vita bundle
needs, followed by user declarations in the order given:

    sce_sys/param.sfo   <- --sfo
    eboot.bin           <- --eboot
    <dst>[/<relpath>]   <- --add src=dst (folders expanded recursively)

Every source is checked while the list is built, so packing never starts on
an input set that is known to be broken.
"""

from __future__ import annotations

import os
from collections.abc import Iterable
from pathlib import Path

from vita_pack_vpk.errors import InvalidSource, NotFound
from vita_pack_vpk.logging import get_logger
from vita_pack_vpk.paths import (
    classify_source,
    join_destination,
    normalize_destination,
    normalize_root,
)
from vita_pack_vpk.types import AddSpec, Entry

SFO_VPK_PATH = "sce_sys/param.sfo"
EBOOT_VPK_PATH = "eboot.bin"

log = get_logger(__name__)


def add_single(source_path: Path, destination_path: str) -> Entry:
    """Map one regular file to *destination_path*.

    Raises ``NotFound`` when the path is missing and ``InvalidSource`` when it
    is anything other than a regular file.
    """
    source_path = Path(source_path)
    if classify_source(source_path) != "file":
        raise InvalidSource(source_path, "not a regular file")
    return Entry(source=source_path, destination=normalize_destination(destination_path))


def _raise_walk_error(exc: OSError) -> None:
    raise NotFound(Path(exc.filename or ""), exc.strerror or str(exc)) from exc


def add_tree(source_dir: Path, destination_root: str) -> list[Entry]:
    """Expand *source_dir* into one entry per regular file beneath it.

    Walk order is depth-first with names sorted at every level, files of a
    directory before its subdirectories. Symlinked directories are not
    followed; other non-regular files are skipped. A *destination_root* of
    ``/`` or ``.`` places the folder's contents at the archive root.
    """
    source_dir = Path(source_dir)
    if classify_source(source_dir) != "dir":
        raise InvalidSource(source_dir, "not a directory")
    root = normalize_root(destination_root)

    entries: list[Entry] = []
    for dirpath, dirnames, filenames in os.walk(
        source_dir, onerror=_raise_walk_error, followlinks=False
    ):
        here = Path(dirpath)
        dirnames.sort()
        for name in [d for d in dirnames if (here / d).is_symlink()]:
            log.warning("Skipping symlinked folder %s", here / name)
        for name in sorted(filenames):
            path = here / name
            try:
                classify_source(path)
            except NotFound:
                raise
            except InvalidSource:
                log.warning("Skipping non-regular file %s", path)
                continue
            rel = path.relative_to(source_dir)
            entries.append(Entry(source=path, destination=join_destination(root, rel)))
    log.debug("Expanded %s into %d entries under %s/", source_dir, len(entries), root)
    return entries


def build_manifest(
    sfo_path: Path, eboot_path: Path, add_specs: Iterable[AddSpec] = ()
) -> list[Entry]:
    """Resolve all inputs into the ordered entry list (fail-fast)."""
    entries: list[Entry] = [
        add_single(Path(sfo_path), SFO_VPK_PATH),
        add_single(Path(eboot_path), EBOOT_VPK_PATH),
    ]
    for spec in add_specs:
        kind = classify_source(spec.source)
        if kind == "file":
            entries.append(add_single(spec.source, spec.destination))
        else:
            entries.extend(add_tree(spec.source, spec.destination))
    log.info("Manifest resolved: %d entries", len(entries))
    return entries


def collapse_duplicates(entries: Iterable[Entry]) -> list[Entry]:
    """Apply last-write-wins to entries sharing a destination.

    A destination keeps the slot of its first occurrence and the source of its
    last one, so the mandatory records stay first and second even when a user
    declaration replaces them.
    """
    slots: dict[str, Entry] = {}
    for entry in entries:
        previous = slots.get(entry.destination)
        if previous is not None:
            log.warning(
                "%s overrides %s at %s", entry.source, previous.source, entry.destination
            )
        slots[entry.destination] = entry
    return list(slots.values())
