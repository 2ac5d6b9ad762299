"""Result models for the rewrite engine.

Contains:
- PendingTarget: A commit queued for rewriting, tracked by identity
- RewriteResult: Outcome of rewriting one commit
- BatchResult: Outcome of rewriting a whole history
"""

from dataclasses import dataclass, field
from typing import Optional

from codeboss.git.commits import CommitInfo
from codeboss.store.models import CommitIdentity


@dataclass
class PendingTarget:
    """A commit waiting to be rewritten.

    Only the identity is kept: commit ids go stale as soon as an ancestor is
    rewritten.
    """

    identity: CommitIdentity
    template: str
    label: str  # short id at planning time, for display only


@dataclass
class RewriteResult:
    """Outcome of rewriting one commit."""

    old_sha: str
    new_sha: str
    message: str
    head: str
    achieved: bool  # new id starts with the target prefix
    replayed: list[tuple[CommitInfo, CommitInfo]] = field(default_factory=list)


@dataclass
class BatchResult:
    """Outcome of rewriting every eligible commit in a history."""

    rewritten: list[RewriteResult] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    head: Optional[str] = None
    # Short ids of non-root commits lacking the prefix once the batch is done
    unbossed: list[str] = field(default_factory=list)
