from __future__ import annotations

from pathlib import Path

from fakes import FakeRunner, make_config, make_context

from termkit.models import StepStatus
from termkit.plugins import bootstrap_plugin_manager


def test_existing_checkout_is_left_alone(repo: Path, fake_home: Path) -> None:
    target = fake_home / ".tmux" / "plugins" / "tpm"
    target.mkdir(parents=True)
    runner = FakeRunner()
    ctx = make_context(make_config(repo, fake_home), runner=runner)

    [result] = list(bootstrap_plugin_manager(ctx))

    assert result.status is StepStatus.OK
    assert runner.calls == []


def test_clones_when_missing(repo: Path, fake_home: Path) -> None:
    runner = FakeRunner()
    ctx = make_context(make_config(repo, fake_home), runner=runner)

    [result] = list(bootstrap_plugin_manager(ctx))

    target = fake_home / ".tmux" / "plugins" / "tpm"
    assert result.status is StepStatus.INSTALLED
    assert runner.calls == [["git", "clone", "https://github.com/tmux-plugins/tpm", str(target)]]
    assert (target / ".git").is_dir()


def test_declined_clone(repo: Path, fake_home: Path) -> None:
    runner = FakeRunner()
    ctx = make_context(make_config(repo, fake_home, force=False), runner=runner, answers=[False])

    [result] = list(bootstrap_plugin_manager(ctx))

    assert result.status is StepStatus.DECLINED
    assert runner.calls == []
    assert not (fake_home / ".tmux" / "plugins" / "tpm").exists()


def test_clone_failure_reports_status(repo: Path, fake_home: Path) -> None:
    class FailingRunner(FakeRunner):
        def _simulate(self, argv: list[str]) -> tuple[int, str]:
            return (128, "") if argv[0] == "git" else super()._simulate(argv)

    ctx = make_context(make_config(repo, fake_home), runner=FailingRunner())

    [result] = list(bootstrap_plugin_manager(ctx))

    assert result.status is StepStatus.FAILED
    assert result.returncode == 128
