import logging
from collections.abc import Callable
from pathlib import Path

import git as gitpython

from wtpick.notify import Notifier
from wtpick.services.repository import RepositoryContext

logger = logging.getLogger(__name__)


def _branch_exists(repo: gitpython.Repo, ref: str) -> bool:
    """Check if a fully-qualified ref exists."""
    try:
        repo.git.rev_parse("--verify", "--quiet", ref)
        return True
    except gitpython.GitCommandError:
        return False


def _remote_branch(repo: gitpython.Repo, branch: str) -> tuple[str, str] | None:
    """Split a remote-tracking branch name into (remote ref, local name), if it is one."""
    name = branch.removeprefix("remotes/")
    remote, sep, local = name.partition("/")
    if not sep or not local:
        return None
    if remote not in {r.name for r in repo.remotes}:
        return None
    if not _branch_exists(repo, f"refs/remotes/{name}"):
        return None
    return name, local


class WorktreeService:
    """Runs `git worktree` mutations against the repository root."""

    def __init__(self, context: RepositoryContext, notifier: Notifier) -> None:
        self._context = context
        self._notifier = notifier
        self.switched_to: Path | None = None

    def _root(self) -> Path | None:
        if self._context.get_root() is None:
            self._context.setup_repository_info()
        return self._context.get_root()

    def _resolve(self, path: str) -> Path:
        candidate = Path(path).expanduser()
        root = self._root()
        if not candidate.is_absolute() and root is not None:
            candidate = root / candidate
        return candidate.resolve()

    def switch(self, path: str) -> None:
        target = self._resolve(path)
        if not target.is_dir():
            self._notifier.echo(f"Worktree path does not exist: {target}")
            return
        logger.info("Switching worktree", extra={"path": str(target)})
        self.switched_to = target

    def delete(
        self,
        path: str,
        forced: bool,
        on_success: Callable[[], None],
        on_failure: Callable[[], None],
    ) -> None:
        root = self._root()
        if root is None:
            on_failure()
            return
        repo = gitpython.Repo(root)
        args = ["remove"]
        if forced:
            args.append("--force")
        args.append(path)
        logger.info("Removing worktree", extra={"path": path, "forced": forced})
        try:
            repo.git.worktree(*args)
        except gitpython.GitCommandError as e:
            logger.warning(
                "Failed to remove worktree",
                extra={"path": path, "forced": forced, "stderr": str(e.stderr or e)},
            )
            on_failure()
            return

        try:
            repo.git.worktree("prune")
        except gitpython.GitCommandError:
            logger.debug("git worktree prune failed", exc_info=True)
        on_success()

    def create(self, path: str, branch: str) -> Path | None:
        root = self._root()
        if root is None:
            self._notifier.echo("Not inside a git repository")
            return None
        repo = gitpython.Repo(root)

        if _branch_exists(repo, f"refs/heads/{branch}"):
            args = ["add", path, branch]
        else:
            remote = _remote_branch(repo, branch)
            if remote is not None:
                remote_ref, local = remote
                if _branch_exists(repo, f"refs/heads/{local}"):
                    args = ["add", path, local]
                else:
                    args = ["add", "--track", "-b", local, path, remote_ref]
                branch = local
            else:
                args = ["add", "-b", branch, path]

        try:
            repo.git.worktree(*args)
        except gitpython.GitCommandError as e:
            stderr = str(e.stderr or e).strip()
            logger.warning("Failed to create worktree", extra={"path": path, "branch": branch, "stderr": stderr})
            self._notifier.echo(f"Failed to create worktree: {stderr}")
            return None

        created = self._resolve(path)
        logger.info("Created worktree", extra={"path": str(created), "branch": branch})
        self._notifier.echo(f"Created worktree {created} (branch: {branch})")
        return created
