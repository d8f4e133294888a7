from __future__ import annotations

from pathlib import Path

import pytest


@pytest.fixture
def bundle(tmp_path: Path) -> dict[str, Path]:
    """Minimal Vita bundle: param.sfo, eboot.bin and an assets/ tree."""
    src = tmp_path / "src"
    (src / "assets" / "sub").mkdir(parents=True)
    sfo = src / "param.sfo"
    eboot = src / "eboot.bin"
    sfo.write_bytes(b"SFO\0")
    eboot.write_bytes(b"ELF\0")
    (src / "assets" / "a.txt").write_bytes(b"alpha\n")
    (src / "assets" / "sub" / "b.txt").write_bytes(b"bravo\n")
    return {"root": src, "sfo": sfo, "eboot": eboot, "assets": src / "assets"}
