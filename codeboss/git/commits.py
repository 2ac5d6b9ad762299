"""Commit metadata utilities.

Contains:
- CommitInfo: Metadata of a single commit
- get_commit_info: Read metadata for a ref
- list_history: All commits reachable from a ref, oldest first
- list_commits_between: Commit ids after a base up to a head, oldest first
- resolve_ref: Resolve a ref to a full commit id
- is_ancestor: Check whether a commit is an ancestor of another
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from codeboss.git.runner import _run_git_command
from codeboss.git.exceptions import GitError
from codeboss.store.models import CommitIdentity

# NUL-separated fields, one record per commit prefixed by a record separator
_FIELDS = ["%H", "%T", "%P", "%an", "%ae", "%at", "%ai", "%ct", "%ci"]
_LOG_FORMAT = "%x1e" + "%x00".join(_FIELDS)


@dataclass
class CommitInfo:
    """Metadata of a single commit."""

    sha: str
    tree: str
    parents: list[str] = field(default_factory=list)
    author_name: str = ""
    author_email: str = ""
    author_timestamp: int = 0
    author_timezone: str = "+0000"
    committer_timestamp: int = 0
    committer_timezone: str = "+0000"

    @property
    def identity(self) -> CommitIdentity:
        return CommitIdentity(
            tree_hash=self.tree,
            author_name=self.author_name,
            author_email=self.author_email,
            author_timestamp=self.author_timestamp,
        )

    @property
    def parent(self) -> Optional[str]:
        """First parent, or None for a root commit."""
        return self.parents[0] if self.parents else None

    @property
    def author(self) -> str:
        """Author formatted as 'Name <email>'."""
        return f"{self.author_name} <{self.author_email}>"

    @property
    def committer_date(self) -> str:
        """Committer date in git's raw '<timestamp> <timezone>' form."""
        return f"{self.committer_timestamp} {self.committer_timezone}"


def _timezone_of(iso_date: str) -> str:
    # "2024-01-17 12:34:56 -0500" -> "-0500"
    parts = iso_date.split(" ")
    return parts[2] if len(parts) >= 3 else "+0000"


def _parse_record(record: str) -> CommitInfo:
    sha, tree, parents, an, ae, at, ai, ct, ci = record.split("\x00")
    return CommitInfo(
        sha=sha,
        tree=tree,
        parents=parents.split(),
        author_name=an,
        author_email=ae,
        author_timestamp=int(at),
        author_timezone=_timezone_of(ai),
        committer_timestamp=int(ct),
        committer_timezone=_timezone_of(ci),
    )


def _parse_log(output: str) -> list[CommitInfo]:
    return [_parse_record(record.strip("\n")) for record in output.split("\x1e") if record.strip()]


def get_commit_info(cwd: Path, ref: str = "HEAD") -> CommitInfo:
    """Read metadata for a single commit.

    Raises:
        GitError: If the ref does not resolve to a commit.
    """
    output = _run_git_command(["log", "-1", f"--format={_LOG_FORMAT}", ref, "--"], cwd=cwd)
    commits = _parse_log(output)
    if not commits:
        raise GitError(f"No commit found for {ref}")
    return commits[0]


def list_history(cwd: Path, ref: str = "HEAD") -> list[CommitInfo]:
    """List every commit reachable from ref, oldest first."""
    output = _run_git_command(["log", "--reverse", f"--format={_LOG_FORMAT}", ref, "--"], cwd=cwd)
    return _parse_log(output)


def list_commits_between(cwd: Path, base: str, head: str = "HEAD") -> list[str]:
    """List commit ids reachable from head but not from base, oldest first."""
    output = _run_git_command(["rev-list", "--reverse", f"{base}..{head}"], cwd=cwd)
    if not output:
        return []
    return output.split("\n")


def resolve_ref(cwd: Path, ref: str) -> str:
    """Resolve a ref to a full commit id.

    Raises:
        GitError: If the ref cannot be resolved to a commit.
    """
    return _run_git_command(["rev-parse", "--verify", "--quiet", f"{ref}^{{commit}}"], cwd=cwd)


def is_ancestor(cwd: Path, ancestor: str, descendant: str = "HEAD") -> bool:
    """Check whether ancestor is reachable from descendant (a commit is its own ancestor)."""
    try:
        _run_git_command(["merge-base", "--is-ancestor", ancestor, descendant], cwd=cwd)
        return True
    except GitError:
        return False
