"""Shared test fixtures and configuration."""

import os
import subprocess
import tempfile
from pathlib import Path

import pytest

from codeboss.config import Settings
from codeboss.mining import FailureReason, MiningOutcome, commit_digest
from codeboss.store import BossificationStore
from codeboss.template import expand_template, parse_template

# 432 variants; enough for a one-character target at the default failure rate
WIDE_TEMPLATE = "Fix {a|b|c|d|e|f}{a|b|c|d|e|f}{a|b|c|d|e|f}{g|h}"

BASE_TIMESTAMP = 1700000000


def git(repo, *args, env=None):
    """Run git in a repository and return its stripped stdout."""
    result = subprocess.run(
        ["git"] + list(args),
        cwd=repo,
        capture_output=True,
        text=True,
        check=True,
        env={**os.environ, **env} if env else None,
    )
    return result.stdout.strip()


def commit_file(repo, filename, content, message, timestamp):
    """Write a file and commit it with fixed author and committer dates."""
    (repo / filename).write_text(content)
    git(repo, "add", filename)
    date = f"{timestamp} +0100"
    git(
        repo,
        "commit",
        "--quiet",
        "-m",
        message,
        env={"GIT_AUTHOR_DATE": date, "GIT_COMMITTER_DATE": date},
    )
    return git(repo, "rev-parse", "HEAD")


def merge_side_branch(repo, timestamp):
    """Branch off HEAD~1, commit there and merge the side branch back with --no-ff."""
    git(repo, "checkout", "--quiet", "-b", "side", "HEAD~1")
    commit_file(repo, "side.txt", "side\n", "Add side", timestamp)
    git(repo, "checkout", "--quiet", "main")
    date = f"{timestamp + 60} +0100"
    git(
        repo,
        "merge",
        "--quiet",
        "--no-ff",
        "--no-edit",
        "-m",
        "Merge side",
        "side",
        env={"GIT_AUTHOR_DATE": date, "GIT_COMMITTER_DATE": date},
    )
    return git(repo, "rev-parse", "HEAD")


class LocalMiner:
    """In-process stand-in for the remote search program.

    Tries variants in enumeration order and hashes each candidate commit
    locally.
    """

    def __init__(self, outcome=None):
        self.outcome = outcome
        self.jobs = []
        self.warm_ups = 0
        self.readiness_checks = 0

    def warm_up(self):
        self.warm_ups += 1

    def ensure_ready(self):
        self.readiness_checks += 1

    def submit(self, job):
        self.jobs.append(job)
        if self.outcome is not None:
            return self.outcome
        for message in expand_template(parse_template(job.template)):
            digest = commit_digest(job, message)
            if digest.startswith(job.target):
                return MiningOutcome.found(message, digest)
        return MiningOutcome.failed(FailureReason.SEARCH_EXHAUSTED)


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def git_repo(tmp_path):
    """Create a repository on branch main with commits A (root) -> B -> C."""
    repo_dir = tmp_path / "repo"
    repo_dir.mkdir()

    git(repo_dir, "init", "--quiet", "-b", "main")
    git(repo_dir, "config", "user.email", "test@example.com")
    git(repo_dir, "config", "user.name", "Test User")
    git(repo_dir, "config", "commit.gpgsign", "false")

    commit_file(repo_dir, "README.md", "# Test Repo\n", "Initial commit", BASE_TIMESTAMP)
    commit_file(repo_dir, "b.txt", "b\n", "Add b", BASE_TIMESTAMP + 60)
    commit_file(repo_dir, "c.txt", "c\n", "Add c", BASE_TIMESTAMP + 120)

    return repo_dir


@pytest.fixture
def settings(tmp_path):
    """Settings with a one-character target and a throwaway store."""
    return Settings(target="0", db_path=tmp_path / "store" / "codeboss.db")


@pytest.fixture
def store(settings):
    """An open bossification store, closed after the test."""
    with BossificationStore(settings.db_path) as store:
        yield store


@pytest.fixture
def local_miner():
    """A miner that searches in-process."""
    return LocalMiner()
