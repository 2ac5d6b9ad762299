"""Commit rewrite engine for codeboss.

This package drives the three rewrite modes:
- models: PendingTarget, RewriteResult, BatchResult
- exceptions: MissingSavedTemplateError, LostCommitError
- rewriter: HistoryRewriter (amend_head, rebase_one, rebase_all)
"""

from codeboss.engine.models import (
    BatchResult,
    PendingTarget,
    RewriteResult,
)
from codeboss.engine.exceptions import (
    LostCommitError,
    MissingSavedTemplateError,
)
from codeboss.engine.rewriter import HistoryRewriter


__all__ = [
    "BatchResult",
    "PendingTarget",
    "RewriteResult",
    "LostCommitError",
    "MissingSavedTemplateError",
    "HistoryRewriter",
]
