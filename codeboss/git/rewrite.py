"""History-editing git operations.

Contains:
- amend_message: Replace HEAD's message keeping tree, parent and author
- replay_commit: Re-apply a commit's changes on top of HEAD
- current_git_date: The current time in git's timestamp and offset form
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

from codeboss.config import TimeMode
from codeboss.git.branch import get_head
from codeboss.git.commits import CommitInfo
from codeboss.git.exceptions import GitError, ReplayConflictError
from codeboss.git.runner import _run_git_command

logger = logging.getLogger(__name__)


def current_git_date() -> tuple[int, str]:
    """Current time as a (unix timestamp, '±HHMM' local offset) pair."""
    now = datetime.now().astimezone()
    return int(now.timestamp()), now.strftime("%z")


def amend_message(
    cwd: Path,
    message: str,
    timestamp: int,
    timezone: str,
    author_name: str,
    author_email: str,
) -> str:
    """Amend HEAD with a new message and fixed dates.

    Author and committer dates are both forced to '<timestamp> <timezone>' and
    the committer identity to the author's, so the new commit object is
    exactly the one a search over (tree, parent, author, time, message)
    predicted.

    Returns:
        The id of the amended commit.
    """
    date = f"{timestamp} {timezone}"
    env = {
        "GIT_AUTHOR_DATE": date,
        "GIT_COMMITTER_DATE": date,
        "GIT_COMMITTER_NAME": author_name,
        "GIT_COMMITTER_EMAIL": author_email,
    }
    _run_git_command(
        [
            "commit",
            "--amend",
            "--allow-empty",
            "--no-verify",
            "--no-gpg-sign",
            "--cleanup=verbatim",
            "--quiet",
            "-m",
            message,
        ],
        cwd=cwd,
        env=env,
    )
    return get_head(cwd)


def replay_commit(
    repo_root: Path,
    commit: CommitInfo,
    time_mode: TimeMode,
    now: Optional[str] = None,
) -> str:
    """Replay a commit on top of HEAD.

    In PRESERVE mode the original author and committer dates are kept; in NOW
    mode both are set to `now` ('<timestamp> <timezone>').

    Returns:
        The id of the new commit.

    Raises:
        ReplayConflictError: If the changes do not apply cleanly. The
            repository is left as git left it.
    """
    try:
        _run_git_command(["cherry-pick", "--no-commit", commit.sha], cwd=repo_root)
    except GitError as e:
        output = "\n".join(part.strip() for part in (e.stdout, e.stderr) if part.strip())
        raise ReplayConflictError(
            f"Failed to replay {commit.sha[:7]}:\n{output}",
            stdout=e.stdout,
            stderr=e.stderr,
        )

    if time_mode is TimeMode.NOW and now is None:
        timestamp, timezone = current_git_date()
        now = f"{timestamp} {timezone}"

    args = ["commit", "--allow-empty", "--no-verify", "--no-gpg-sign", "--quiet", "-C", commit.sha]
    if time_mode is TimeMode.NOW:
        args += ["--date", now]
        env = {"GIT_COMMITTER_DATE": now}
    else:
        env = {"GIT_COMMITTER_DATE": commit.committer_date}
    _run_git_command(args, cwd=repo_root, env=env)

    new_sha = get_head(repo_root)
    logger.debug("Replayed %s as %s", commit.sha, new_sha)
    return new_sha
