"""Line codec between `git worktree list` output and picker lines.

Listing lines arrive as ``<path> <sha> [<branch>]`` separated by runs of
whitespace. Picker lines are ``<branch>\\t<path>\\t<sha>`` so the picker can
split columns on the tab while paths and branch names keep their spaces.
"""

import re

from wtpick.constants import BARE_MARKER, LIST_DELIMITER
from wtpick.models import WorktreeRecord

_WHITESPACE_RE = re.compile(r"\s+")
_BRANCH_RE = re.compile(r"^[*+]*+\s*\(?([^\s)]+)")
_NO_BRANCH_RE = re.compile(r"\(no.*?\)")


def _split_collapsed(raw: str) -> list[str]:
    cleaned = _WHITESPACE_RE.sub(" ", raw.strip())
    if not cleaned:
        return []
    return cleaned.split(" ")


def parse_listing_line(raw: str) -> WorktreeRecord | None:
    """Parse one line of `git worktree list` output.

    Returns None for blank or single-field lines and for the bare repository entry.
    """
    fields = _split_collapsed(raw)
    if len(fields) < 2:
        return None
    if fields[1] == BARE_MARKER:
        return None
    branch = fields[2] if len(fields) > 2 else ""
    return WorktreeRecord(path=fields[0], sha=fields[1], branch=branch)


def encode(record: WorktreeRecord) -> str:
    return LIST_DELIMITER.join((record.branch, record.path, record.sha))


def decode(selected: str | None) -> WorktreeRecord | None:
    """Turn a picker line back into a record.

    Lines without the delimiter (typed or space-separated input) fall back to
    whitespace splitting, read in the same branch, path, sha order; a raw
    listing line given here comes back with its fields swapped.
    """
    if not selected:
        return None
    fields = selected.split(LIST_DELIMITER)
    if len(fields) < 2:
        fields = _split_collapsed(selected)
    if len(fields) < 2:
        return None
    sha = fields[2] if len(fields) > 2 else ""
    return WorktreeRecord(branch=fields[0], path=fields[1], sha=sha)


def parse_branch_name(line: str | None) -> str | None:
    """Extract a branch name from a `git branch` line such as ``* main`` or ``+ feat``."""
    if not line:
        return None
    if "(no branch, bisect" in line:
        line = _NO_BRANCH_RE.sub(" ", line)
    match = _BRANCH_RE.match(line)
    if not match:
        return None
    return match.group(1)
