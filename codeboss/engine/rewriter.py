"""History rewrite engine.

Every mode is built from one primitive: mine a message for a commit that is
checked out somewhere, amend it there and capture the new commit id.
- amend_head: rewrite HEAD in place; the branch follows
- rebase_one: rewrite an ancestor in an isolated worktree, move the branch to
  it and replay the descendants
- rebase_all: rewrite every commit lacking the prefix with its saved template,
  oldest first, re-finding each pending commit by identity after every step
"""

import logging
from pathlib import Path
from typing import Callable, Optional

from codeboss.config import Settings, TimeMode
from codeboss.entropy import EntropyAssessment, require_entropy
from codeboss.exceptions import InsufficientEntropyError, PreconditionError
from codeboss.engine.exceptions import LostCommitError, MissingSavedTemplateError
from codeboss.engine.models import BatchResult, PendingTarget, RewriteResult
from codeboss.git import (
    CommitInfo,
    GitError,
    ReplayConflictError,
    amend_message,
    current_git_date,
    get_commit_info,
    get_current_branch,
    get_head,
    has_uncommitted_changes,
    is_ancestor,
    isolated_worktree,
    list_commits_between,
    list_history,
    replay_commit,
    reset_hard,
    resolve_ref,
)
from codeboss.mining import MiningClient, MiningError, MiningJob, commit_digest
from codeboss.store import BossificationStore, CommitIdentity
from codeboss.template import count_variants, parse_template

logger = logging.getLogger(__name__)


def _silent(message: str) -> None:
    pass


def _require_linear(commits: list[CommitInfo]) -> None:
    # Mining hashes a single parent and cherry-pick cannot replay merges
    for commit in commits:
        if len(commit.parents) > 1:
            raise PreconditionError(
                f"Commit {commit.sha[:7]} is a merge commit; only linear history can be rewritten"
            )


class HistoryRewriter:
    """Rewrites commits of one repository so their ids start with the target."""

    def __init__(
        self,
        repo_root: Path,
        store: BossificationStore,
        miner: MiningClient,
        settings: Settings,
        echo: Callable[[str], None] = _silent,
    ):
        self.repo_root = repo_root
        self.store = store
        self.miner = miner
        self.settings = settings
        self.echo = echo

    # ------------------------------------------------------------------
    # Preconditions and admission
    # ------------------------------------------------------------------

    def _require_branch(self) -> str:
        branch = get_current_branch(self.repo_root)
        if branch is None:
            raise PreconditionError("Must be on a branch (not detached HEAD)")
        return branch

    def _require_clean(self) -> None:
        if has_uncommitted_changes(self.repo_root):
            raise PreconditionError(
                "Working tree has uncommitted changes to tracked files; commit or stash them first"
            )

    @staticmethod
    def _require_parent(commit: CommitInfo) -> None:
        if commit.parent is None:
            raise PreconditionError(
                f"Commit {commit.sha[:7]} has no parent (need at least 2 commits)"
            )
        _require_linear([commit])

    def resolve_template(self, commit: CommitInfo, template: Optional[str]) -> str:
        """Return the given template, or the one saved for the commit's identity.

        Raises:
            MissingSavedTemplateError: If no template is given and none is saved.
        """
        if template is not None:
            return template
        saved = self.store.lookup(commit.identity)
        if saved is None:
            raise MissingSavedTemplateError(
                f"No template given and none saved for {commit.sha[:7]}"
            )
        self.echo(f"Using saved template for {commit.sha[:7]}: {saved.template}")
        return saved.template

    def admit(self, template: str) -> EntropyAssessment:
        """Compile a template and run admission control on it.

        Raises:
            MalformedTemplateError: If the template does not parse.
            InsufficientEntropyError: If it has too few variants.
        """
        variants = count_variants(parse_template(template))
        return require_entropy(variants, self.settings.target_bits, self.settings.inverse_failure_rate)

    def _achieved(self, sha: str) -> bool:
        return sha.startswith(self.settings.target)

    # ------------------------------------------------------------------
    # Primitive
    # ------------------------------------------------------------------

    def _bossify(
        self,
        cwd: Path,
        commit: CommitInfo,
        template: str,
        time_mode: TimeMode,
        assessment: EntropyAssessment,
    ) -> tuple[str, str]:
        """Mine a message for the commit checked out at cwd and amend it.

        Returns:
            (new commit id, winning message)

        Raises:
            MiningError: If the search produced no message.
        """
        if time_mode is TimeMode.PRESERVE:
            timestamp, timezone = commit.author_timestamp, commit.author_timezone
        else:
            timestamp, timezone = current_git_date()

        job = MiningJob(
            template=template,
            tree_hash=commit.tree,
            parent_hash=commit.parent,
            author=commit.author,
            timestamp=timestamp,
            timezone=timezone,
            target=self.settings.target,
        )

        # Saved before mining so a failed run can be retried without the template
        self.store.upsert(commit.identity, template)

        self.echo(f"Target:   {self.settings.target}")
        self.echo(f"Template: {template}")
        self.echo(f"Tree:     {commit.tree}")
        self.echo(f"Parent:   {commit.parent}")
        self.echo(f"Author:   {commit.author}")
        self.echo(f"Time:     {timestamp} {timezone}")
        self.echo(
            f"Entropy:  {assessment.entropy_bits:.1f} bits ({assessment.variant_count:,} variations)"
        )

        self.miner.ensure_ready()
        self.echo("Mining...")
        outcome = self.miner.submit(job)
        if not outcome.success:
            raise MiningError(outcome)

        expected = commit_digest(job, outcome.message)
        new_sha = amend_message(
            cwd,
            outcome.message,
            timestamp,
            timezone,
            commit.author_name,
            commit.author_email,
        )
        if new_sha != expected:
            self.echo(f"Warning: amended commit {new_sha} differs from the mined commit {expected}")

        if timestamp != commit.author_timestamp:
            # The rewritten commit has a new identity; remember the template for it too
            rewritten = CommitIdentity(
                tree_hash=commit.tree,
                author_name=commit.author_name,
                author_email=commit.author_email,
                author_timestamp=timestamp,
            )
            self.store.upsert(rewritten, template)

        logger.debug("Bossified %s -> %s", commit.sha, new_sha)
        return new_sha, outcome.message

    def _rewrite_in_history(
        self,
        target: CommitInfo,
        template: str,
        time_mode: TimeMode,
        assessment: EntropyAssessment,
    ) -> RewriteResult:
        """Rewrite an ancestor of HEAD and replay everything after it."""
        to_replay = [
            get_commit_info(self.repo_root, sha)
            for sha in list_commits_between(self.repo_root, target.sha)
        ]
        _require_linear(to_replay)
        self.echo(f"Commits to replay: {len(to_replay)}")

        with isolated_worktree(self.repo_root, target.sha) as worktree:
            # Captured while the worktree still exists
            new_target, message = self._bossify(worktree, target, template, time_mode, assessment)

        self.echo(f"Resetting to bossed commit {new_target[:7]}")
        reset_hard(self.repo_root, new_target)

        replayed = []
        if to_replay:
            self.echo(f"Replaying {len(to_replay)} commit(s)...")
        for commit in to_replay:
            try:
                new_sha = replay_commit(self.repo_root, commit, time_mode)
            except ReplayConflictError as e:
                head = get_head(self.repo_root)
                raise ReplayConflictError(
                    f"{e}\nBranch stopped at {head[:7]} after replaying "
                    f"{len(replayed)} of {len(to_replay)} commit(s)",
                    stdout=e.stdout,
                    stderr=e.stderr,
                )
            replayed.append((commit, get_commit_info(self.repo_root, new_sha)))

        return RewriteResult(
            old_sha=target.sha,
            new_sha=new_target,
            message=message,
            head=get_head(self.repo_root),
            achieved=self._achieved(new_target),
            replayed=replayed,
        )

    # ------------------------------------------------------------------
    # Modes
    # ------------------------------------------------------------------

    def amend_head(self, template: Optional[str] = None, time_mode: TimeMode = TimeMode.PRESERVE) -> RewriteResult:
        """Rewrite HEAD in place.

        Raises:
            PreconditionError: If detached, dirty or HEAD is a root commit.
        """
        self._require_branch()
        self._require_clean()
        head = get_commit_info(self.repo_root, "HEAD")
        self._require_parent(head)

        template = self.resolve_template(head, template)
        assessment = self.admit(template)

        new_sha, message = self._bossify(self.repo_root, head, template, time_mode, assessment)
        return RewriteResult(
            old_sha=head.sha,
            new_sha=new_sha,
            message=message,
            head=new_sha,
            achieved=self._achieved(new_sha),
        )

    def rebase_one(self, ref: str, template: Optional[str], time_mode: TimeMode) -> RewriteResult:
        """Rewrite one ancestor of HEAD (or HEAD itself) and replay its descendants.

        Raises:
            PreconditionError: If the ref is unresolvable or not an ancestor,
                or a merge commit would have to be rewritten or replayed.
            ReplayConflictError: If a descendant does not replay cleanly.
        """
        self._require_branch()
        self._require_clean()
        self.miner.warm_up()

        try:
            target_sha = resolve_ref(self.repo_root, ref)
        except GitError:
            raise PreconditionError(f"Cannot resolve commit: {ref}")
        if not is_ancestor(self.repo_root, target_sha, "HEAD"):
            raise PreconditionError(f"Target {ref} is not an ancestor of HEAD")

        target = get_commit_info(self.repo_root, target_sha)
        self._require_parent(target)
        template = self.resolve_template(target, template)
        assessment = self.admit(template)

        self.echo(f"Rebasing {ref} ({target_sha[:7]}), time mode: {time_mode.value}")
        return self._rewrite_in_history(target, template, time_mode, assessment)

    def plan_all(self) -> tuple[list[PendingTarget], list[str]]:
        """Work out which commits rebase_all will rewrite, without touching anything.

        Returns:
            (pending targets oldest first, short ids of skipped commits)

        Raises:
            PreconditionError: If the history contains a merge commit.
            MissingSavedTemplateError: If a commit lacking the prefix has no template.
            InsufficientEntropyError: If a saved template fails admission control.
        """
        pending = []
        skipped = []
        for commit in list_history(self.repo_root):
            short = commit.sha[:7]
            _require_linear([commit])
            if self._achieved(commit.sha):
                self.echo(f"{short} already bossed")
                skipped.append(short)
                continue
            if commit.parent is None:
                self.echo(f"{short} is a root commit, skipping")
                skipped.append(short)
                continue

            saved = self.store.lookup(commit.identity)
            if saved is None:
                raise MissingSavedTemplateError(f"{short} has no saved template - cannot boss")
            try:
                assessment = self.admit(saved.template)
            except InsufficientEntropyError as e:
                raise InsufficientEntropyError(
                    e.assessment, f"{short} template has insufficient entropy"
                )
            pending.append(PendingTarget(identity=commit.identity, template=saved.template, label=short))
            logger.debug("Planned %s (%d variations)", short, assessment.variant_count)

        return pending, skipped

    def _locate(self, identity: CommitIdentity, label: str) -> CommitInfo:
        # First match wins when two commits share an identity
        for commit in list_history(self.repo_root):
            if commit.identity == identity:
                return commit
        raise LostCommitError(f"Lost track of {label} after rewriting its ancestors")

    def rebase_all(self, time_mode: TimeMode) -> BatchResult:
        """Rewrite every commit lacking the prefix, oldest first, using saved templates.

        Nothing is rewritten unless every such commit has a saved template
        that passes admission control.
        """
        self._require_branch()
        self._require_clean()
        self.miner.warm_up()

        pending, skipped = self.plan_all()
        result = BatchResult(skipped=skipped)
        if not pending:
            result.head = get_head(self.repo_root)
            return result

        self.echo(f"Commits to boss: {len(pending)}")
        self.miner.ensure_ready()

        for index, target in enumerate(pending):
            commit = self._locate(target.identity, target.label)
            self.echo(f"[{index + 1}/{len(pending)}] Bossing {commit.sha[:7]}...")
            assessment = self.admit(target.template)
            step = self._rewrite_in_history(commit, target.template, time_mode, assessment)
            result.rewritten.append(step)

            # Replaying can change identities (NOW mode); carry pending targets across
            renamed = {old.identity: new.identity for old, new in step.replayed if old.identity != new.identity}
            for later in pending[index + 1:]:
                later.identity = renamed.get(later.identity, later.identity)

        result.head = get_head(self.repo_root)
        # Replaying can knock the prefix off commits that were skipped up front
        result.unbossed = [
            commit.sha[:7]
            for commit in list_history(self.repo_root)
            if commit.parent is not None and not self._achieved(commit.sha)
        ]
        return result
