"""Bossification store for codeboss.

This package persists which template was used for each logical commit:
- models: CommitIdentity, Bossification data models
- db: BossificationStore (SQLite)
"""

from codeboss.store.models import (
    Bossification,
    CommitIdentity,
)
from codeboss.store.db import BossificationStore


__all__ = [
    "Bossification",
    "CommitIdentity",
    "BossificationStore",
]
