from __future__ import annotations

from pathlib import Path

import pytest
from fakes import make_config, make_context


def test_forced_run_never_prompts(repo: Path, fake_home: Path) -> None:
    ctx = make_context(make_config(repo, fake_home, force=True), answers=[])

    assert ctx.confirm("Install git?") is True


def test_prompt_answers_are_used(repo: Path, fake_home: Path) -> None:
    ctx = make_context(make_config(repo, fake_home, force=False), answers=[True, False])

    assert ctx.confirm("Install git?") is True
    assert ctx.confirm("Install fzf?") is False


def test_end_of_input_counts_as_no(repo: Path, fake_home: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    def closed_stdin(*_args, **_kwargs):  # noqa: ANN002, ANN003, ANN202
        raise EOFError

    monkeypatch.setattr("termkit.context.Confirm.ask", closed_stdin)
    ctx = make_context(make_config(repo, fake_home, force=False))

    assert ctx.confirm("Install git?") is False
