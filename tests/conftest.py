from pathlib import Path

import pytest

from wtpick.config import ResolvedConfig
from wtpick.models import PickerOptions, PickerResult
from wtpick.notify import Notifier


@pytest.fixture(autouse=True)
def _isolate_config_dir(tmp_path: Path, monkeypatch):
    """Keep the real ~/.config/wtpick out of tests."""
    config_dir = tmp_path / "wtpick-config"
    monkeypatch.setattr("wtpick.config.CONFIG_DIR", config_dir)
    monkeypatch.setattr("wtpick.logging_config.CONFIG_DIR", config_dir)


def make_config(repo_root: Path | None = None, **overrides) -> ResolvedConfig:
    values = dict(
        repo_root=repo_root,
        prompt="Git Worktrees> ",
        create_prompt="Git Branches> ",
        with_nth=[1, 2, 3],
        delete_key="ctrl+d",
        toggle_force_key="ctrl+f",
        confirm_deletions=None,
        confirm_telescope_deletions=None,
    )
    values.update(overrides)
    return ResolvedConfig(**values)


@pytest.fixture()
def fake_config(tmp_path: Path) -> ResolvedConfig:
    repo_root = tmp_path / "repo"
    repo_root.mkdir()
    return make_config(repo_root)


class FakePicker:
    """Replays scripted picker results and records what it was shown."""

    def __init__(self, *results: PickerResult | None) -> None:
        self._results = list(results)
        self.calls: list[tuple[list[str], PickerOptions]] = []

    def __call__(self, lines: list[str], options: PickerOptions) -> PickerResult | None:
        self.calls.append((list(lines), options))
        return self._results.pop(0) if self._results else None


class FakePrompter:
    def __init__(self, *answers: str | None) -> None:
        self._answers = list(answers)
        self.prompts: list[tuple[str, str]] = []

    def ask(self, prompt: str, default: str = "") -> str | None:
        self.prompts.append((prompt, default))
        return self._answers.pop(0) if self._answers else ""


class FakeService:
    """Records mutation calls; `delete_succeeds` picks which continuation runs."""

    def __init__(self, delete_succeeds: bool = True) -> None:
        self.delete_succeeds = delete_succeeds
        self.switched: list[str] = []
        self.deleted: list[tuple[str, bool]] = []
        self.created: list[tuple[str, str]] = []

    def switch(self, path: str) -> None:
        self.switched.append(path)

    def delete(self, path, forced, on_success, on_failure) -> None:
        self.deleted.append((path, forced))
        if self.delete_succeeds:
            on_success()
        else:
            on_failure()

    def create(self, path: str, branch: str) -> None:
        self.created.append((path, branch))


@pytest.fixture()
def notifier() -> Notifier:
    return Notifier()
