from __future__ import annotations

import logging
import os
import sys
import zipfile
from pathlib import Path

import pytest
from typer.testing import CliRunner

from vita_pack_vpk.cli import app

runner = CliRunner()


def _args(bundle: dict[str, Path], *extra: str) -> list[str]:
    return ["-s", str(bundle["sfo"]), "-b", str(bundle["eboot"]), *extra]


@pytest.mark.timeout(20)
def test_cli_builds_vpk(bundle, tmp_path: Path) -> None:
    out = tmp_path / "game.vpk"
    result = runner.invoke(app, _args(bundle, "--add", f"{bundle['assets']}=data", str(out)))
    assert result.exit_code == 0, result.output
    assert "successfully created" in result.output

    with zipfile.ZipFile(out) as z:
        assert z.namelist() == [
            "sce_sys/param.sfo",
            "eboot.bin",
            "data/a.txt",
            "data/sub/b.txt",
        ]
        assert z.read("sce_sys/param.sfo") == b"SFO\0"
        assert z.read("eboot.bin") == b"ELF\0"


@pytest.mark.timeout(20)
def test_cli_default_output_name(bundle, tmp_path: Path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("VPK_OUTPUT", raising=False)
    result = runner.invoke(app, _args(bundle))
    assert result.exit_code == 0, result.output
    assert zipfile.is_zipfile(tmp_path / "output.vpk")


@pytest.mark.timeout(20)
def test_cli_output_from_env(bundle, tmp_path: Path) -> None:
    out = tmp_path / "env.vpk"
    result = runner.invoke(app, _args(bundle), env={"VPK_OUTPUT": str(out)})
    assert result.exit_code == 0, result.output
    assert zipfile.is_zipfile(out)


@pytest.mark.timeout(20)
def test_cli_missing_sfo_exits_noinput(bundle, tmp_path: Path) -> None:
    out = tmp_path / "never.vpk"
    args = ["-s", str(tmp_path / "nope.sfo"), "-b", str(bundle["eboot"]), str(out)]
    result = runner.invoke(app, args)
    assert result.exit_code == 66
    assert "Error" in result.output
    assert not out.exists()


@pytest.mark.timeout(20)
def test_cli_unwritable_output_exits_cantcreat(bundle, tmp_path: Path) -> None:
    result = runner.invoke(app, _args(bundle, str(tmp_path / "missing" / "x.vpk")))
    assert result.exit_code == 73


@pytest.mark.timeout(20)
def test_cli_malformed_add_is_usage_error(bundle, tmp_path: Path) -> None:
    out = tmp_path / "never.vpk"
    result = runner.invoke(app, _args(bundle, "--add", "no-separator", str(out)))
    assert result.exit_code == 2
    assert not out.exists()


@pytest.mark.timeout(20)
def test_cli_requires_mandatory_inputs(bundle) -> None:
    result = runner.invoke(app, ["-s", str(bundle["sfo"])])
    assert result.exit_code != 0


@pytest.mark.timeout(20)
def test_cli_dry_run_lists_manifest(bundle, tmp_path: Path) -> None:
    out = tmp_path / "dry.vpk"
    result = runner.invoke(
        app, _args(bundle, "--dry-run", "-a", f"{bundle['assets']}=data", str(out))
    )
    assert result.exit_code == 0, result.output
    assert "sce_sys/param.sfo" in result.output
    assert "data/sub/b.txt" in result.output
    assert not out.exists()


def _package_records(caplog) -> list[logging.LogRecord]:
    return [r for r in caplog.records if r.name.startswith("vita_pack_vpk")]


@pytest.mark.timeout(20)
def test_cli_folder_at_archive_root(bundle, tmp_path: Path) -> None:
    out = tmp_path / "root.vpk"
    result = runner.invoke(app, _args(bundle, "-a", f"{bundle['assets']}=/", str(out)))
    assert result.exit_code == 0, result.output
    with zipfile.ZipFile(out) as z:
        assert z.namelist() == ["sce_sys/param.sfo", "eboot.bin", "a.txt", "sub/b.txt"]


@pytest.mark.skipif(sys.platform != "linux", reason="needs byte file names")
@pytest.mark.timeout(20)
def test_cli_undecodable_name_exits_dataerr(bundle, tmp_path: Path) -> None:
    fd = os.open(os.fsencode(bundle["assets"]) + b"/bad\xff.txt", os.O_CREAT | os.O_WRONLY)
    os.close(fd)
    out = tmp_path / "never.vpk"
    result = runner.invoke(app, _args(bundle, "-a", f"{bundle['assets']}=data", str(out)))
    assert result.exit_code == 65
    assert not out.exists()


@pytest.mark.timeout(20)
def test_cli_verbose_logs_each_entry(bundle, tmp_path: Path, caplog) -> None:
    result = runner.invoke(app, _args(bundle, "--verbose", str(tmp_path / "v.vpk")))
    assert result.exit_code == 0, result.output
    packed = [r for r in _package_records(caplog) if r.getMessage().startswith("Packed")]
    assert [r.levelno for r in packed] == [logging.DEBUG, logging.DEBUG]
    assert packed[1].destination == "eboot.bin"


@pytest.mark.timeout(20)
def test_cli_quiet_then_default_level(bundle, tmp_path: Path, caplog) -> None:
    result = runner.invoke(app, _args(bundle, "--quiet", str(tmp_path / "q.vpk")))
    assert result.exit_code == 0, result.output
    assert not [r for r in _package_records(caplog) if r.levelno < logging.WARNING]

    caplog.clear()
    result = runner.invoke(app, _args(bundle, str(tmp_path / "d.vpk")))
    assert result.exit_code == 0, result.output
    levels = {r.levelno for r in _package_records(caplog)}
    assert logging.INFO in levels
    assert logging.DEBUG not in levels


@pytest.mark.timeout(20)
def test_cli_verbose_and_quiet_conflict(bundle, tmp_path: Path) -> None:
    out = tmp_path / "never.vpk"
    result = runner.invoke(app, _args(bundle, "-v", "-q", str(out)))
    assert result.exit_code == 2
    assert not out.exists()


@pytest.mark.timeout(20)
def test_cli_version() -> None:
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0, result.output
    assert result.output.strip()
