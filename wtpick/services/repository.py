import logging
from pathlib import Path

import git as gitpython

logger = logging.getLogger(__name__)


class RepositoryContext:
    """Locates the git repository that the picker operates on."""

    def __init__(self, cwd: Path | str | None = None) -> None:
        self._cwd = cwd
        self._root: Path | None = None

    def setup_repository_info(self) -> None:
        try:
            repo = gitpython.Repo(self._cwd or ".", search_parent_directories=True)
        except (gitpython.InvalidGitRepositoryError, gitpython.NoSuchPathError):
            logger.debug("Not inside a git repository", extra={"cwd": str(self._cwd or ".")})
            self._root = None
            return
        # Bare repositories have no working tree; `git worktree list` still works in the git dir
        root = repo.working_tree_dir or repo.git_dir
        self._root = Path(root)

    def get_root(self) -> Path | None:
        return self._root
