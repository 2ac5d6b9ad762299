"""Git command runner and repository utilities.

Contains:
- _run_git_command: Run a git command and return its output
- get_repo_root: Get the root directory of the current git repository
"""

import logging
import os
import subprocess
from pathlib import Path
from typing import Optional

from codeboss.git.exceptions import GitError

logger = logging.getLogger(__name__)


def _run_git_command(
    args: list[str],
    cwd: Optional[Path] = None,
    env: Optional[dict[str, str]] = None,
) -> str:
    """Run a git command and return its output.

    Args:
        args: List of arguments to pass to git.
        cwd: Directory to run git in (defaults to the process working directory).
        env: Extra environment variables layered over os.environ.

    Returns:
        The stdout of the git command, stripped.

    Raises:
        GitError: If the command fails.
    """
    logger.debug("git %s (cwd=%s)", " ".join(args), cwd or ".")
    full_env = {**os.environ, **env} if env else None
    try:
        result = subprocess.run(
            ["git"] + args,
            capture_output=True,
            text=True,
            check=True,
            cwd=cwd,
            env=full_env,
        )
        return result.stdout.strip()
    except subprocess.CalledProcessError as e:
        stdout = e.stdout or ""
        stderr = e.stderr or ""
        raise GitError(
            f"Git command failed: git {' '.join(args)}\n{stderr.strip()}",
            stdout=stdout,
            stderr=stderr,
        )
    except FileNotFoundError:
        raise GitError("Git is not installed or not in PATH.")


def get_repo_root(cwd: Optional[Path] = None) -> Path:
    """Get the root directory of the current git repository.

    Returns:
        Path to the repository root.

    Raises:
        GitError: If not in a git repository.
    """
    try:
        root = _run_git_command(["rev-parse", "--show-toplevel"], cwd=cwd)
        return Path(root)
    except GitError:
        raise GitError("Not in a git repository. Please run this command from within a git repo.")
