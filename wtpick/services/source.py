import logging
from pathlib import Path

import git as gitpython

from wtpick.codec import encode, parse_listing_line
from wtpick.services.repository import RepositoryContext

logger = logging.getLogger(__name__)


def run_git(args: list[str], cwd: Path | str) -> tuple[list[str], int]:
    """Run `git <args>` in cwd. Returns (stdout lines, exit code); never raises on failure."""
    try:
        status, stdout, stderr = gitpython.Git(str(cwd)).execute(
            ["git", *args],
            with_extended_output=True,
            with_exceptions=False,
        )
    except gitpython.GitCommandNotFound:
        logger.warning("git executable not found", extra={"git_args": args})
        return [], 127
    if status != 0:
        logger.debug("git command failed", extra={"git_args": args, "status": status, "stderr": stderr})
    return stdout.splitlines(), status


def list_worktrees(context: RepositoryContext, runner=run_git) -> list[str]:
    """Encoded picker lines for every non-bare worktree, or [] when listing is impossible."""
    context.setup_repository_info()
    root = context.get_root()
    if root is None:
        return []

    output, code = runner(["worktree", "list"], root)
    if code != 0:
        logger.warning("git worktree list failed", extra={"root": str(root), "returncode": code})
        return []

    lines = []
    for raw in output:
        record = parse_listing_line(raw)
        if record is None:
            logger.debug("Skipping worktree list line", extra={"line": raw})
            continue
        lines.append(encode(record))
    return lines


def list_branches(context: RepositoryContext, runner=run_git) -> list[str]:
    """Raw `git branch --all` lines for the branch picker."""
    context.setup_repository_info()
    root = context.get_root()
    if root is None:
        return []
    output, code = runner(["branch", "--all"], root)
    if code != 0:
        logger.warning("git branch failed", extra={"root": str(root), "returncode": code})
        return []
    # Symbolic refs such as `remotes/origin/HEAD -> origin/main` are not branches.
    return [line for line in output if line.strip() and " -> " not in line]
