"""Shared Pydantic models."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, field_validator

from vita_pack_vpk.errors import InvalidAddSpec


class Entry(BaseModel):
    """One source file and the path it takes inside the vpk archive."""

    model_config = ConfigDict(frozen=True)

    source: Path
    destination: str

    @field_validator("destination")
    @classmethod
    def _relative_posix(cls, value: str) -> str:
        if not value:
            raise ValueError("destination must not be empty")
        if value.startswith("/") or "\\" in value:
            raise ValueError("destination must be a relative, forward-slash path")
        if any(part in {"", ".", ".."} for part in value.split("/")):
            raise ValueError("destination must not contain empty, '.' or '..' segments")
        return value


class AddSpec(BaseModel):
    """A user declaration: put *source* (file or folder) at *destination*."""

    source: Path
    destination: str

    @classmethod
    def parse(cls, raw: str) -> AddSpec:
        # Last '=' wins: source paths may contain one.
        src, sep, dst = raw.rpartition("=")
        if not sep or not src or not dst:
            raise InvalidAddSpec(raw)
        return cls(source=Path(src), destination=dst)
