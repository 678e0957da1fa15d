"""Staged change model and the LLM-free commit message builders."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Sequence

NO_STAGED_CHANGES = "chore: no staged changes"

STATUS_LABELS = {
    "A": "added",
    "M": "modified",
    "D": "deleted",
    "R": "renamed",
    "C": "copied",
    "U": "updated",
}
DEFAULT_LABEL = "changed"


@dataclass(frozen=True)
class StagedChange:
    """A single entry of ``git diff --cached --name-status``."""

    status: str  # first character of the git status code
    path: str


def parse_name_status(output: str) -> List[StagedChange]:
    """Parse ``<status>\\t<path>`` lines into staged changes.

    Multi-letter codes such as ``R100`` keep only their first character.
    Paths may contain whitespace; the remaining tokens are rejoined with a
    single space. Lines missing either part are skipped.
    """
    changes: List[StagedChange] = []
    for line in output.splitlines():
        tokens = line.split()
        if len(tokens) < 2:
            continue
        status = tokens[0][0]
        path = " ".join(tokens[1:]).strip()
        if not path:
            continue
        changes.append(StagedChange(status=status, path=path))
    return changes


def group_by_status(changes: Iterable[StagedChange]) -> Dict[str, List[str]]:
    """Group paths by status code, keeping first-seen category order."""
    groups: Dict[str, List[str]] = {}
    for change in changes:
        groups.setdefault(change.status, []).append(change.path)
    return groups


def _render_category(label: str, files: List[str], limit: int) -> str:
    shown = ", ".join(files[:limit])
    part = f"{label} {shown}" if shown else label
    if len(files) > limit:
        part += f" and {len(files) - limit} more"
    return part


def build_deterministic_message(
    changes: Sequence[StagedChange], max_files_per_category: int = 5
) -> str:
    """Summarise staged changes per category, e.g. ``chore: added a.py``.

    At most ``max_files_per_category`` names are listed per category; the
    rest are reported as ``and N more``.
    """
    if not changes:
        return NO_STAGED_CHANGES
    limit = max(0, max_files_per_category)
    parts = [
        _render_category(STATUS_LABELS.get(status, DEFAULT_LABEL), files, limit)
        for status, files in group_by_status(changes).items()
    ]
    return f"chore: {'; '.join(parts)}"


def build_fallback_message(changes: Sequence[StagedChange]) -> str:
    """Constant-size classification used when the LLM path is unavailable."""
    if not changes:
        return NO_STAGED_CHANGES
    has_added = any(c.status.startswith("A") for c in changes)
    has_modified = any(c.status.startswith("M") for c in changes)
    has_deleted = any(c.status.startswith("D") for c in changes)

    if has_added and not has_modified and not has_deleted:
        return "feat: add new files"
    if has_modified and not has_added and not has_deleted:
        return "fix: update existing files"
    if has_deleted and not has_added and not has_modified:
        return "chore: remove files"
    return "chore: update files"
