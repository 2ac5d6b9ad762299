"""Git command surface for codeboss.

This package provides the git operations the rewrite engine needs:
- exceptions: GitError, ReplayConflictError
- runner: _run_git_command, get_repo_root
- branch: get_current_branch, get_head, has_uncommitted_changes, reset_hard
- commits: CommitInfo, get_commit_info, list_history, list_commits_between,
           resolve_ref, is_ancestor
- worktree: isolated_worktree, remove_worktree
- rewrite: amend_message, replay_commit, current_git_date
"""

# Exceptions
from codeboss.git.exceptions import (
    GitError,
    ReplayConflictError,
)

# Runner utilities
from codeboss.git.runner import (
    _run_git_command,
    get_repo_root,
)

# Branch utilities
from codeboss.git.branch import (
    get_current_branch,
    get_head,
    has_uncommitted_changes,
    reset_hard,
)

# Commit metadata
from codeboss.git.commits import (
    CommitInfo,
    get_commit_info,
    is_ancestor,
    list_commits_between,
    list_history,
    resolve_ref,
)

# Worktrees
from codeboss.git.worktree import (
    isolated_worktree,
    remove_worktree,
)

# History editing
from codeboss.git.rewrite import (
    amend_message,
    current_git_date,
    replay_commit,
)


__all__ = [
    # Exceptions
    "GitError",
    "ReplayConflictError",
    # Runner
    "_run_git_command",
    "get_repo_root",
    # Branch
    "get_current_branch",
    "get_head",
    "has_uncommitted_changes",
    "reset_hard",
    # Commits
    "CommitInfo",
    "get_commit_info",
    "is_ancestor",
    "list_commits_between",
    "list_history",
    "resolve_ref",
    # Worktrees
    "isolated_worktree",
    "remove_worktree",
    # History editing
    "amend_message",
    "current_git_date",
    "replay_commit",
]
