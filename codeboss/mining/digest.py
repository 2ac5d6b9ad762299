"""Local computation of commit ids.

A git commit id is the SHA-1 of ``"commit <len>\\0" + content`` where content
is the header lines, a blank line and the message. This mirrors what the
remote search program hashes, so the engine can check that an amended commit
came out as predicted.
"""

import hashlib

from codeboss.mining.models import MiningJob


def commit_header(job: MiningJob) -> str:
    """Header of the commit object a job describes (committer = author)."""
    signature = f"{job.author} {job.timestamp} {job.timezone}"
    return (
        f"tree {job.tree_hash}\n"
        f"parent {job.parent_hash}\n"
        f"author {signature}\n"
        f"committer {signature}\n"
        "\n"
    )


def commit_digest(job: MiningJob, message: str) -> str:
    """Commit id the job produces for a given message."""
    content = (commit_header(job) + message + "\n").encode("utf-8")
    return hashlib.sha1(b"commit %d\x00" % len(content) + content).hexdigest()
