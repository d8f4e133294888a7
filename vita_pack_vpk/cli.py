"""vita-pack-vpk CLI — build a .vpk from param.sfo, eboot.bin and extra files.

Usage:
  vita-pack-vpk -s param.sfo -b eboot.bin [-a src=dst ...] [output.vpk]

Flags:
- --add src=dst (repeatable): file or folder src placed at dst in the archive;
  dst of `/` puts a folder's contents at the archive root
- --dry-run: resolve and print the manifest, write nothing
- --verbose / --quiet: adjust JSON log verbosity on stderr (not both)
- VPK_OUTPUT env var: output path when none is given
"""

from __future__ import annotations

import logging
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

import typer
from rich import print as rprint
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from vita_pack_vpk.core import BuildContext, build_pipeline
from vita_pack_vpk.errors import InvalidAddSpec, VpkError
from vita_pack_vpk.logging import set_level
from vita_pack_vpk.package.vpk import DEFAULT_OUTPUT_FILE
from vita_pack_vpk.types import AddSpec

app = typer.Typer(add_completion=False, help="Pack a PS Vita application into a .vpk")
console = Console()


def _version_callback(value: bool) -> None:
    if not value:
        return
    try:
        rprint(version("vita-pack-vpk"))
    except PackageNotFoundError:
        rprint("unknown")
    raise typer.Exit()


def _parse_adds(values: list[str] | None) -> list[AddSpec]:
    specs: list[AddSpec] = []
    for raw in values or []:
        try:
            specs.append(AddSpec.parse(raw))
        except InvalidAddSpec as exc:
            raise typer.BadParameter(str(exc), param_hint="--add") from exc
    return specs


@app.command()
def pack(
    vpk: str = typer.Argument(
        DEFAULT_OUTPUT_FILE, envvar="VPK_OUTPUT", help="Name and path to the new .vpk file"
    ),
    sfo: str = typer.Option(
        ..., "--sfo", "-s", metavar="param.sfo", help="Sets the param.sfo file"
    ),
    eboot: str = typer.Option(
        ..., "--eboot", "-b", metavar="eboot.bin", help="Sets the eboot.bin file"
    ),
    add: list[str] | None = typer.Option(
        None,
        "--add",
        "-a",
        metavar="src=dst",
        help="Adds the file or directory src to the vpk as dst (/ for the archive root)",
        show_default=False,
    ),
    dry_run: bool = typer.Option(False, "--dry-run", help="Print the manifest, write nothing"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log every packed entry"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only log warnings and errors"),
    _version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit",
    ),
) -> None:
    if verbose and quiet:
        raise typer.BadParameter("--verbose and --quiet are mutually exclusive")
    set_level(logging.DEBUG if verbose else logging.WARNING if quiet else logging.INFO)

    ctx = BuildContext(
        sfo=Path(sfo),
        eboot=Path(eboot),
        adds=_parse_adds(add),
        output=Path(vpk),
        dry_run=dry_run,
    )
    try:
        result = build_pipeline(ctx)
    except VpkError as exc:
        rprint(f"[red]Error:[/red] {escape(str(exc))}")
        raise typer.Exit(code=exc.exit_code) from exc

    if not result.written:
        table = Table(title="VPK Manifest")
        table.add_column("Archive path", style="cyan", no_wrap=True)
        table.add_column("Source")
        for entry in result.entries:
            table.add_row(escape(entry.destination), escape(str(entry.source)))
        console.print(table)
        return

    rprint(f"[green]File successfully created[/green] \\[{escape(str(result.output))}]")


if __name__ == "__main__":
    app()
