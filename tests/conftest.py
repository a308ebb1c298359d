from __future__ import annotations

from pathlib import Path

import pytest


@pytest.fixture
def fake_home(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("USERPROFILE", str(home))
    monkeypatch.delenv("APPDATA", raising=False)
    return home


@pytest.fixture
def repo(tmp_path: Path) -> Path:
    root = tmp_path / "dotfiles"
    (root / "git").mkdir(parents=True)
    (root / "zsh").mkdir()
    (root / "git" / ".gitconfig").write_text("[user]\n\tname = Dev\n")
    (root / "zsh" / ".zshrc").write_text("export EDITOR=nvim\n")
    return root


@pytest.fixture
def debian_root(tmp_path: Path) -> Path:
    root = tmp_path / "sysroot"
    (root / "etc").mkdir(parents=True)
    (root / "etc" / "debian_version").write_text("12.5\n")
    return root
