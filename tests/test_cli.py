from __future__ import annotations

import io
from pathlib import Path

import pytest
from fakes import FONT_URL, FakeDownloader, FakeRunner, font_archive
from rich.console import Console
from typer.testing import CliRunner

from termkit.cli import app
from termkit.config import load_config
from termkit.installer import Installer
from termkit.models import OsKind, PackageManager, Platform

runner = CliRunner()


def _patch_installer(monkeypatch: pytest.MonkeyPatch, sysroot: Path, fake_runner: FakeRunner) -> None:
    def build(config_path, repo, *, force, fail_fast):  # noqa: ANN001, ANN202
        config = load_config(config_path, repo_root=repo, force=force, fail_fast=fail_fast)
        return Installer.create(
            config,
            runner=fake_runner,
            downloader=FakeDownloader({FONT_URL: font_archive()}),
            console=Console(file=io.StringIO()),
            system="Linux",
            root=sysroot,
        )

    monkeypatch.setattr("termkit.cli._build_installer", build)


@pytest.mark.parametrize("flag", ["--help", "-h"])
def test_help_exits_zero(flag: str) -> None:
    result = runner.invoke(app, ["install", flag])
    assert result.exit_code == 0
    assert "--force" in result.stdout


def test_install_force_reports_summary(
    monkeypatch: pytest.MonkeyPatch, repo: Path, fake_home: Path, debian_root: Path
) -> None:
    _patch_installer(monkeypatch, debian_root, FakeRunner())

    result = runner.invoke(app, ["install", "--force", "--repo", str(repo)])

    assert result.exit_code == 0, result.stdout
    assert "Installation complete" in result.stdout
    assert "installed" in result.stdout
    assert (fake_home / ".gitconfig").is_symlink()


def test_install_failure_propagates_exit_status(
    monkeypatch: pytest.MonkeyPatch, repo: Path, fake_home: Path, debian_root: Path
) -> None:
    _patch_installer(monkeypatch, debian_root, FakeRunner(failures={"tmux": 42}))

    result = runner.invoke(app, ["install", "-f", "--fail-fast", "--repo", str(repo)])

    assert result.exit_code == 42
    assert "failed" in result.stdout


def test_install_unknown_package_manager(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path, repo: Path, fake_home: Path
) -> None:
    generic = tmp_path / "generic"
    (generic / "etc").mkdir(parents=True)
    _patch_installer(monkeypatch, generic, FakeRunner())

    result = runner.invoke(app, ["install", "-f", "--repo", str(repo)])

    assert result.exit_code == 1
    assert "Could not detect a package manager" in result.stdout
    assert list(fake_home.iterdir()) == []


def test_install_bad_config(repo: Path, fake_home: Path) -> None:
    (repo / "termkit.toml").write_text("[settings\n")

    result = runner.invoke(app, ["install", "--repo", str(repo)])

    assert result.exit_code == 1
    assert "TOML" in result.stdout


def test_cli_handles_permission_error(monkeypatch: pytest.MonkeyPatch) -> None:
    def build(*_args, **_kwargs):  # noqa: ANN002, ANN003, ANN202
        raise PermissionError("mocked")

    monkeypatch.setattr("termkit.cli._build_installer", build)

    result = runner.invoke(app, ["install"])
    assert result.exit_code == 1
    assert "Permission denied" in result.stdout


def test_detect_reports_platform(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("termkit.cli.detect_platform", lambda: Platform(OsKind.FEDORA, PackageManager.DNF))

    result = runner.invoke(app, ["detect"])

    assert result.exit_code == 0
    assert "fedora" in result.stdout
    assert "dnf" in result.stdout


def test_detect_unknown_exits_non_zero(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("termkit.cli.detect_platform", lambda: Platform(OsKind.LINUX, PackageManager.UNKNOWN))

    result = runner.invoke(app, ["detect"])

    assert result.exit_code == 1


def test_deploy_config_command(monkeypatch: pytest.MonkeyPatch, repo: Path, fake_home: Path) -> None:
    theme = repo / "alacritty" / "themes" / "catppuccin_mocha.toml"
    theme.parent.mkdir(parents=True)
    theme.write_text("[colors]\n")
    monkeypatch.setattr("termkit.cli.detect_platform", lambda: Platform(OsKind.WINDOWS, PackageManager.SCOOP))

    result = runner.invoke(app, ["deploy-config", "--force", "--repo", str(repo)])

    assert result.exit_code == 0, result.stdout
    assert (fake_home / "AppData" / "Roaming" / "alacritty" / "alacritty.toml").exists()


def test_install_with_closed_stdin_declines_everything(
    monkeypatch: pytest.MonkeyPatch, repo: Path, fake_home: Path, debian_root: Path
) -> None:
    fake_runner = FakeRunner()
    _patch_installer(monkeypatch, debian_root, fake_runner)

    result = runner.invoke(app, ["install", "--repo", str(repo)], input="")

    assert result.exit_code == 0, result.stdout
    assert "Aborted" not in result.stdout
    assert "declined" in result.stdout
    assert fake_runner.calls == []
    assert not (fake_home / ".gitconfig").exists()


def test_deploy_config_refuses_non_windows(monkeypatch: pytest.MonkeyPatch, repo: Path, fake_home: Path) -> None:
    monkeypatch.setattr("termkit.cli.detect_platform", lambda: Platform(OsKind.DEBIAN, PackageManager.APT))

    result = runner.invoke(app, ["deploy-config", "--force", "--repo", str(repo)])

    assert result.exit_code == 1
    assert "only deployed on Windows" in result.stdout
    assert not (fake_home / "AppData").exists()
