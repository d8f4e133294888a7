"""Build orchestration: resolve manifest -> pack vpk."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from vita_pack_vpk.logging import get_logger
from vita_pack_vpk.manifest import build_manifest
from vita_pack_vpk.package.vpk import DEFAULT_OUTPUT_FILE, pack_vpk
from vita_pack_vpk.types import AddSpec, Entry

log = get_logger(__name__)


@dataclass
class BuildContext:
    sfo: Path
    eboot: Path
    adds: list[AddSpec] = field(default_factory=list)
    output: Path = Path(DEFAULT_OUTPUT_FILE)
    dry_run: bool = False


@dataclass
class BuildResult:
    entries: list[Entry]
    output: Path
    written: bool


def build_pipeline(ctx: BuildContext) -> BuildResult:
    # The whole manifest is validated before the output file is opened.
    entries = build_manifest(ctx.sfo, ctx.eboot, ctx.adds)
    if ctx.dry_run:
        log.info("Dry run: %s not written", ctx.output)
        return BuildResult(entries=entries, output=ctx.output, written=False)

    path = pack_vpk(entries, ctx.output)
    return BuildResult(entries=entries, output=path, written=True)
