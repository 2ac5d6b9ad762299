"""Data models for the bossification store.

Contains Pydantic models:
- CommitIdentity: Content and authorship of a commit, stable across message rewrites
- Bossification: Which template was used for a logical commit
"""

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict


class CommitIdentity(BaseModel):
    """The parts of a commit that survive a message-only rewrite.

    Two commits with equal identities are treated as the same logical commit.
    """

    model_config = ConfigDict(frozen=True)

    tree_hash: str
    author_name: str
    author_email: str
    author_timestamp: int


class Bossification(BaseModel):
    """A stored record of the template used to vanity-rewrite a commit."""

    tree_hash: str
    author_name: str
    author_email: str
    author_timestamp: int
    template: str
    created_at: int  # Unix timestamp

    @property
    def identity(self) -> CommitIdentity:
        return CommitIdentity(
            tree_hash=self.tree_hash,
            author_name=self.author_name,
            author_email=self.author_email,
            author_timestamp=self.author_timestamp,
        )

    @property
    def created_at_display(self) -> str:
        """UTC creation time as 'YYYY-MM-DD HH:MM:SS'."""
        return datetime.fromtimestamp(self.created_at, tz=timezone.utc).strftime("%Y-%m-%d %H:%M:%S")
