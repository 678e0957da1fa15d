"""Git operations for commiter."""

import logging
import subprocess
from pathlib import Path
from typing import List, Optional

from .changes import StagedChange, parse_name_status
from .exceptions import GitError

logger = logging.getLogger(__name__)


def find_git_repo_root(start_path: Optional[Path] = None) -> Optional[Path]:
    """Return the top-level Git repository directory for ``start_path``.

    Uses ``git rev-parse --show-toplevel`` and falls back to walking parent
    directories looking for a ``.git`` entry. Returns ``None`` when no
    repository is found.
    """

    path = Path(start_path or Path.cwd()).expanduser().resolve(strict=False)
    if path.is_file():
        path = path.parent

    try:
        result = subprocess.run(
            ["git", "rev-parse", "--show-toplevel"],
            cwd=path,
            capture_output=True,
            text=True,
            check=True,
        )
        top = result.stdout.strip()
        if top:
            return Path(top)
    except (subprocess.CalledProcessError, FileNotFoundError):
        pass

    for candidate in (path, *path.parents):
        if (candidate / ".git").exists():
            return candidate

    return None


class GitRepo:
    """Handles Git repository operations.

    Read-only queries (staged status, staged diff, branch name) never raise:
    a failing command yields an empty result. Mutating commands raise
    :class:`GitError`.
    """

    def __init__(self, repo_path: Optional[str] = None) -> None:
        self.repo_path = Path(repo_path or ".")

    def _run_git_command(self, args: List[str]) -> str:
        """Run a Git command and return its output."""
        try:
            result = subprocess.run(
                ["git"] + args,
                cwd=self.repo_path,
                capture_output=True,
                encoding="utf-8",
                errors="replace",
                check=True,
            )
            return result.stdout.strip()
        except subprocess.CalledProcessError as e:
            cmd = " ".join(args)
            raise GitError(f"Git command failed: {cmd}\n{e.stderr}") from e
        except FileNotFoundError as exc:
            raise GitError("Git command not found. Please install Git.") from exc

    def _query(self, args: List[str]) -> str:
        """Run a read-only Git command; any failure yields an empty string."""
        try:
            result = subprocess.run(
                ["git"] + args,
                cwd=self.repo_path,
                capture_output=True,
                encoding="utf-8",
                errors="replace",
                check=False,
            )
        except (FileNotFoundError, NotADirectoryError) as exc:
            logger.debug("git %s could not run: %s", " ".join(args), exc)
            return ""
        if result.returncode != 0:
            logger.debug(
                "git %s exited %s: %s",
                " ".join(args),
                result.returncode,
                (result.stderr or "").strip(),
            )
            return ""
        return result.stdout

    def list_staged_changes(self) -> List[StagedChange]:
        """Return staged files with their single-letter status codes."""
        return parse_name_status(self._query(["diff", "--cached", "--name-status"]))

    def get_staged_diff(self) -> str:
        """Get the full diff of staged changes."""
        return self._query(["diff", "--cached"])

    def current_branch(self) -> str:
        return self._query(["rev-parse", "--abbrev-ref", "HEAD"]).strip()

    def stage_all(self) -> None:
        """Stage all changes (including new and deleted files)."""
        self._run_git_command(["add", "-A"])

    def commit(self, message: str) -> str:
        """Create a commit with the given message."""
        return self._run_git_command(["commit", "-m", message])

    def push(self, remote: str = "origin", branch: Optional[str] = None) -> str:
        """Push the current branch to ``remote``.

        If branch is None it is resolved via ``git rev-parse --abbrev-ref HEAD``.
        """
        if branch is None:
            branch = self.current_branch()
        if not branch:
            raise GitError("Could not determine current branch name.")
        return self._run_git_command(["push", remote, branch])
