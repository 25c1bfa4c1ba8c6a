from pathlib import Path

CONFIG_DIR = Path.home() / ".config" / "wtpick"
PROJECT_CONFIG_NAME = ".wtpick.toml"
LOG_FILE_NAME = "wtpick.log"

# Reserved field separator for picker lines; never appears in git paths or refs
LIST_DELIMITER = "\t"
BARE_MARKER = "(bare)"

DEFAULT_PROMPT = "Git Worktrees> "
DEFAULT_CREATE_PROMPT = "Git Branches> "
DEFAULT_WITH_NTH = [1, 2, 3]
PATH_PROMPT = "Path to subtree > "
DEFAULT_PATH_PREFIX = "../"

ACTION_DEFAULT = "default"
DEFAULT_DELETE_KEY = "ctrl+d"
DEFAULT_TOGGLE_FORCE_KEY = "ctrl+f"

NO_WORKTREES_MESSAGE = "No worktrees found"
