"""Typed failures for manifest resolution and packing.

Every error carries the process exit status the CLI reports for it. Values
follow the BSD ``sysexits.h`` convention so scripts can tell a missing input
apart from an unwritable output.
"""

from __future__ import annotations

from pathlib import Path

EX_USAGE = 64
EX_DATAERR = 65
EX_NOINPUT = 66
EX_CANTCREAT = 73
EX_IOERR = 74


class VpkError(Exception):
    exit_code: int = 1


class InvalidAddSpec(VpkError):
    """A ``src=dst`` declaration could not be split into two non-empty halves."""

    exit_code = EX_USAGE

    def __init__(self, raw: str) -> None:
        super().__init__(
            f"Need <src=dst> with src the source file or folder and dst its path "
            f"in the vpk archive, got {raw!r}"
        )
        self.raw = raw


class InvalidDestination(VpkError):
    exit_code = EX_DATAERR

    def __init__(self, raw: str, reason: str) -> None:
        super().__init__(f"Invalid archive path {raw!r}: {reason}")
        self.raw = raw


class InvalidSource(VpkError):
    """The path exists but is neither a regular file nor a directory."""

    exit_code = EX_DATAERR

    def __init__(self, path: Path, reason: str = "not a regular file or directory") -> None:
        super().__init__(f"Invalid source {str(path)!r}: {reason}")
        self.path = Path(path)


class NotFound(InvalidSource):
    exit_code = EX_NOINPUT

    def __init__(self, path: Path, reason: str = "file or folder doesn't exist") -> None:
        super().__init__(path, reason)


class CannotCreate(VpkError):
    exit_code = EX_CANTCREAT

    def __init__(self, path: Path, cause: OSError) -> None:
        super().__init__(f"Unable to create {str(path)!r}: {cause.strerror or cause}")
        self.path = Path(path)


class SourceUnreadable(VpkError):
    exit_code = EX_IOERR

    def __init__(self, path: Path, cause: OSError) -> None:
        super().__init__(f"Unable to read {str(path)!r}: {cause.strerror or cause}")
        self.path = Path(path)


class ContainerWriteFailure(VpkError):
    exit_code = EX_IOERR

    def __init__(self, path: Path, cause: Exception) -> None:
        super().__init__(f"Failed writing archive {str(path)!r}: {cause}")
        self.path = Path(path)
