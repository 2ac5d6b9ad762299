"""Git branch and working tree utilities.

Contains:
- get_current_branch: Get the current branch name (None when detached)
- get_head: Get the commit id HEAD points at
- has_uncommitted_changes: Check for changes to tracked files
- reset_hard: Move the current branch to a commit
"""

from pathlib import Path
from typing import Optional

from codeboss.git.runner import _run_git_command
from codeboss.git.exceptions import GitError


def get_current_branch(repo_root: Path) -> Optional[str]:
    """Get the current branch name.

    Returns:
        The current branch name, or None if in detached HEAD state.
    """
    try:
        branch = _run_git_command(["symbolic-ref", "--quiet", "--short", "HEAD"], cwd=repo_root)
    except GitError:
        # Detached HEAD state
        return None
    return branch or None


def get_head(cwd: Path) -> str:
    """Get the full commit id of HEAD."""
    return _run_git_command(["rev-parse", "HEAD"], cwd=cwd)


def has_uncommitted_changes(repo_root: Path) -> bool:
    """Check if tracked files have staged or unstaged changes.

    Untracked files are ignored: neither amending nor a hard reset touches them.
    """
    status = _run_git_command(["status", "--porcelain=v1", "--untracked-files=no"], cwd=repo_root)
    return bool(status)


def reset_hard(repo_root: Path, commit: str) -> None:
    """Point the current branch, index and working tree at a commit."""
    _run_git_command(["reset", "--hard", "--quiet", commit], cwd=repo_root)
