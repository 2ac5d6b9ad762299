"""Isolated working copies.

Contains:
- isolated_worktree: Context manager yielding a detached worktree at a commit
- remove_worktree: Remove a worktree, falling back to deleting the directory
"""

import logging
import os
import shutil
import tempfile
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from codeboss.git.runner import _run_git_command
from codeboss.git.exceptions import GitError

logger = logging.getLogger(__name__)


def _worktree_path() -> Path:
    stamp = f"{int(time.time() * 1000)}-{os.getpid()}"
    return Path(tempfile.gettempdir()) / f"codeboss-rebase-{stamp}"


@contextmanager
def isolated_worktree(repo_root: Path, commit: str) -> Iterator[Path]:
    """Check out a commit in a disposable, detached worktree.

    The worktree is removed on every exit path. Anything read from it (such as
    the id of a commit amended inside it) must be captured before the block
    ends.

    Args:
        repo_root: The main repository.
        commit: Commit to check out.

    Yields:
        Path of the worktree.
    """
    path = _worktree_path()
    _run_git_command(["worktree", "add", "--detach", "--quiet", str(path), commit], cwd=repo_root)
    logger.debug("Created worktree %s at %s", path, commit)
    try:
        yield path
    finally:
        remove_worktree(repo_root, path)


def remove_worktree(repo_root: Path, path: Path) -> None:
    """Remove a worktree; cleanup failures are never raised."""
    try:
        _run_git_command(["worktree", "remove", "--force", str(path)], cwd=repo_root)
        logger.debug("Removed worktree %s", path)
        return
    except GitError as e:
        logger.debug("git worktree remove failed, deleting directory: %s", e)

    shutil.rmtree(path, ignore_errors=True)
    try:
        _run_git_command(["worktree", "prune"], cwd=repo_root)
    except GitError as e:
        logger.debug("git worktree prune failed: %s", e)
