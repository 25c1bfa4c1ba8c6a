import logging
from pathlib import Path
from unittest.mock import MagicMock

import git as gitpython
import pytest

from wtpick.services.repository import RepositoryContext
from wtpick.services.source import list_branches, list_worktrees, run_git


class StubContext:
    def __init__(self, root: Path | None) -> None:
        self._root = root
        self.setup_calls = 0

    def setup_repository_info(self) -> None:
        self.setup_calls += 1

    def get_root(self) -> Path | None:
        return self._root


def _runner(output: list[str], code: int = 0):
    calls = []

    def run(args, cwd):
        calls.append((args, cwd))
        return output, code

    run.calls = calls
    return run


class TestRepositoryContext:
    def test_resolves_working_tree(self, monkeypatch):
        mock_repo = MagicMock()
        mock_repo.working_tree_dir = "/home/user/repo"
        monkeypatch.setattr(gitpython, "Repo", lambda *a, **kw: mock_repo)
        context = RepositoryContext()
        context.setup_repository_info()
        assert context.get_root() == Path("/home/user/repo")

    def test_bare_repository_uses_git_dir(self, monkeypatch):
        mock_repo = MagicMock()
        mock_repo.working_tree_dir = None
        mock_repo.git_dir = "/home/user/repo.git"
        monkeypatch.setattr(gitpython, "Repo", lambda *a, **kw: mock_repo)
        context = RepositoryContext()
        context.setup_repository_info()
        assert context.get_root() == Path("/home/user/repo.git")

    @pytest.mark.parametrize("error", [
        gitpython.InvalidGitRepositoryError("not a repo"),
        gitpython.NoSuchPathError("/missing"),
    ])
    def test_no_root_outside_repository(self, monkeypatch, error):
        monkeypatch.setattr(gitpython, "Repo", MagicMock(side_effect=error))
        context = RepositoryContext()
        context.setup_repository_info()
        assert context.get_root() is None


class TestRunGit:
    def test_returns_lines_and_status(self, monkeypatch):
        mock_git = MagicMock()
        mock_git.execute.return_value = (0, "one\ntwo", "")
        monkeypatch.setattr(gitpython, "Git", lambda *a, **kw: mock_git)

        assert run_git(["worktree", "list"], "/repo") == (["one", "two"], 0)
        mock_git.execute.assert_called_once_with(
            ["git", "worktree", "list"],
            with_extended_output=True,
            with_exceptions=False,
        )

    def test_reports_failure_status(self, monkeypatch):
        mock_git = MagicMock()
        mock_git.execute.return_value = (128, "", "fatal: not a git repository")
        monkeypatch.setattr(gitpython, "Git", lambda *a, **kw: mock_git)
        assert run_git(["worktree", "list"], "/repo") == ([], 128)

    def test_missing_git_executable(self, monkeypatch):
        mock_git = MagicMock()
        mock_git.execute.side_effect = gitpython.GitCommandNotFound("git", "not found")
        monkeypatch.setattr(gitpython, "Git", lambda *a, **kw: mock_git)
        assert run_git(["worktree", "list"], "/repo") == ([], 127)


class TestListWorktrees:
    def test_encodes_and_skips_bare(self):
        runner = _runner([
            "/repo/main  abc123  master",
            "/repo/feat  def456  feature-x",
            "/repo/bare  (bare)",
        ])
        lines = list_worktrees(StubContext(Path("/repo")), runner=runner)
        assert lines == ["master\t/repo/main\tabc123", "feature-x\t/repo/feat\tdef456"]

    def test_runs_in_repository_root(self):
        runner = _runner([])
        context = StubContext(Path("/repo"))
        list_worktrees(context, runner=runner)
        assert context.setup_calls == 1
        assert runner.calls == [(["worktree", "list"], Path("/repo"))]

    def test_no_root_returns_empty_without_running(self):
        runner = _runner(["/repo/main abc123 master"])
        assert list_worktrees(StubContext(None), runner=runner) == []
        assert runner.calls == []

    def test_failed_listing_returns_empty(self):
        runner = _runner(["/repo/main abc123 master"], code=128)
        assert list_worktrees(StubContext(Path("/repo")), runner=runner) == []

    def test_skips_malformed_lines(self):
        runner = _runner(["", "garbage", "/repo/main abc123 master", "   "])
        lines = list_worktrees(StubContext(Path("/repo")), runner=runner)
        assert lines == ["master\t/repo/main\tabc123"]

    def test_failing_git_with_debug_logging(self, monkeypatch, caplog):
        caplog.set_level(logging.DEBUG)
        mock_git = MagicMock()
        mock_git.execute.return_value = (128, "", "fatal: boom")
        monkeypatch.setattr(gitpython, "Git", lambda *a, **kw: mock_git)
        assert list_worktrees(StubContext(Path("/repo"))) == []
        assert "git command failed" in caplog.text

    def test_missing_git_executable_with_debug_logging(self, monkeypatch, caplog):
        caplog.set_level(logging.DEBUG)
        mock_git = MagicMock()
        mock_git.execute.side_effect = gitpython.GitCommandNotFound("git", "not found")
        monkeypatch.setattr(gitpython, "Git", lambda *a, **kw: mock_git)
        assert list_worktrees(StubContext(Path("/repo"))) == []
        assert "git executable not found" in caplog.text


class TestListBranches:
    def test_drops_blank_lines(self):
        runner = _runner(["* main", "  feature-x", "", "  remotes/origin/main"])
        branches = list_branches(StubContext(Path("/repo")), runner=runner)
        assert branches == ["* main", "  feature-x", "  remotes/origin/main"]
        assert runner.calls == [(["branch", "--all"], Path("/repo"))]

    def test_failure_returns_empty(self):
        runner = _runner(["* main"], code=1)
        assert list_branches(StubContext(Path("/repo")), runner=runner) == []

    def test_outside_repository(self):
        assert list_branches(StubContext(None), runner=_runner(["* main"])) == []

    def test_skips_symbolic_refs(self):
        runner = _runner(["* main", "  remotes/origin/HEAD -> origin/main", "  remotes/origin/main"])
        branches = list_branches(StubContext(Path("/repo")), runner=runner)
        assert branches == ["* main", "  remotes/origin/main"]
