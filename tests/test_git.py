"""Tests for codeboss.git module."""

import subprocess
from unittest.mock import MagicMock

import pytest

from codeboss.config import TimeMode
from codeboss.git import (
    GitError,
    ReplayConflictError,
    _run_git_command,
    amend_message,
    get_commit_info,
    get_current_branch,
    get_head,
    get_repo_root,
    has_uncommitted_changes,
    is_ancestor,
    isolated_worktree,
    list_commits_between,
    list_history,
    remove_worktree,
    replay_commit,
    reset_hard,
    resolve_ref,
)
from conftest import BASE_TIMESTAMP, commit_file, git


class TestRunGitCommand:
    """Tests for _run_git_command function."""

    def test_successful_command(self, mocker):
        """Test successful git command execution."""
        mock_result = MagicMock()
        mock_result.stdout = "output\n"
        mock_result.returncode = 0

        mocker.patch("subprocess.run", return_value=mock_result)

        assert _run_git_command(["status"]) == "output"

    def test_failed_command_keeps_output(self, mocker):
        """Test that a failed command raises GitError with git's output."""
        mocker.patch(
            "subprocess.run",
            side_effect=subprocess.CalledProcessError(1, "git", output="out", stderr="error"),
        )

        with pytest.raises(GitError) as exc_info:
            _run_git_command(["invalid"])

        assert "Git command failed" in str(exc_info.value)
        assert exc_info.value.stdout == "out"
        assert exc_info.value.stderr == "error"

    def test_git_not_found_raises_error(self, mocker):
        """Test that missing git raises GitError."""
        mocker.patch("subprocess.run", side_effect=FileNotFoundError())

        with pytest.raises(GitError) as exc_info:
            _run_git_command(["status"])

        assert "not installed" in str(exc_info.value)

    def test_extra_env_is_layered(self, mocker):
        """Test that extra environment variables are merged over os.environ."""
        mock_run = mocker.patch("subprocess.run", return_value=MagicMock(stdout=""))
        mocker.patch.dict("os.environ", {"EXISTING": "1"})

        _run_git_command(["status"], env={"GIT_AUTHOR_DATE": "1 +0000"})

        env = mock_run.call_args.kwargs["env"]
        assert env["EXISTING"] == "1"
        assert env["GIT_AUTHOR_DATE"] == "1 +0000"


class TestGetRepoRoot:
    """Tests for get_repo_root function."""

    def test_returns_path(self, git_repo):
        """Test that the repository root is returned."""
        assert get_repo_root(git_repo).resolve() == git_repo.resolve()

    def test_raises_error_if_not_repo(self, mocker):
        """Test error if not in a git repository."""
        mocker.patch(
            "subprocess.run",
            side_effect=subprocess.CalledProcessError(128, "git", stderr="not a git repo"),
        )

        with pytest.raises(GitError) as exc_info:
            get_repo_root()

        assert "Not in a git repository" in str(exc_info.value)


class TestBranchState:
    """Tests for branch and working tree helpers."""

    def test_current_branch(self, git_repo):
        """Test the branch name on a normal checkout."""
        assert get_current_branch(git_repo) == "main"

    def test_detached_head_has_no_branch(self, git_repo):
        """Test that a detached HEAD reports no branch."""
        git(git_repo, "checkout", "--quiet", "--detach", "HEAD~1")

        assert get_current_branch(git_repo) is None

    def test_clean_tree(self, git_repo):
        """Test that a fresh repository has no changes."""
        assert not has_uncommitted_changes(git_repo)

    def test_untracked_files_ignored(self, git_repo):
        """Test that untracked files don't count as changes."""
        (git_repo / "scratch.txt").write_text("scratch")

        assert not has_uncommitted_changes(git_repo)

    def test_modified_tracked_file(self, git_repo):
        """Test that an edited tracked file counts as a change."""
        (git_repo / "b.txt").write_text("changed\n")

        assert has_uncommitted_changes(git_repo)

    def test_reset_hard_moves_branch(self, git_repo):
        """Test that reset_hard moves the current branch."""
        parent = git(git_repo, "rev-parse", "HEAD~1")

        reset_hard(git_repo, parent)

        assert get_head(git_repo) == parent
        assert get_current_branch(git_repo) == "main"


class TestCommitInfo:
    """Tests for commit metadata helpers."""

    def test_reads_metadata(self, git_repo):
        """Test reading a commit's tree, parent, author and dates."""
        info = get_commit_info(git_repo, "HEAD")

        assert info.sha == git(git_repo, "rev-parse", "HEAD")
        assert info.tree == git(git_repo, "rev-parse", "HEAD^{tree}")
        assert info.parent == git(git_repo, "rev-parse", "HEAD~1")
        assert info.author == "Test User <test@example.com>"
        assert info.author_timestamp == BASE_TIMESTAMP + 120
        assert info.author_timezone == "+0100"
        assert info.committer_date == f"{BASE_TIMESTAMP + 120} +0100"

    def test_root_has_no_parent(self, git_repo):
        """Test that the root commit has no parent."""
        assert get_commit_info(git_repo, "HEAD~2").parent is None

    def test_identity(self, git_repo):
        """Test the identity derived from a commit."""
        info = get_commit_info(git_repo, "HEAD")

        assert info.identity.tree_hash == info.tree
        assert info.identity.author_timestamp == info.author_timestamp

    def test_list_history_oldest_first(self, git_repo):
        """Test that history is listed root first."""
        history = list_history(git_repo)

        assert [c.sha for c in history] == git(git_repo, "rev-list", "--reverse", "HEAD").split("\n")
        assert history[0].parent is None

    def test_list_commits_between(self, git_repo):
        """Test the commits after a base, oldest first."""
        base = git(git_repo, "rev-parse", "HEAD~2")

        commits = list_commits_between(git_repo, base)

        assert commits == [git(git_repo, "rev-parse", "HEAD~1"), git(git_repo, "rev-parse", "HEAD")]

    def test_list_commits_between_head_and_itself(self, git_repo):
        """Test that nothing lies between HEAD and HEAD."""
        assert list_commits_between(git_repo, "HEAD") == []

    def test_resolve_ref(self, git_repo):
        """Test resolving an abbreviated ref."""
        assert resolve_ref(git_repo, "HEAD~1") == git(git_repo, "rev-parse", "HEAD~1")

    def test_resolve_unknown_ref_raises(self, git_repo):
        """Test that an unknown ref raises GitError."""
        with pytest.raises(GitError):
            resolve_ref(git_repo, "no-such-ref")

    def test_is_ancestor(self, git_repo):
        """Test ancestry checks, including a commit against itself."""
        root = git(git_repo, "rev-parse", "HEAD~2")
        head = git(git_repo, "rev-parse", "HEAD")

        assert is_ancestor(git_repo, root, head)
        assert is_ancestor(git_repo, head, head)
        assert not is_ancestor(git_repo, head, root)


class TestWorktree:
    """Tests for isolated worktrees."""

    def test_worktree_checked_out_at_commit(self, git_repo):
        """Test that the worktree is detached at the requested commit."""
        target = git(git_repo, "rev-parse", "HEAD~1")

        with isolated_worktree(git_repo, target) as path:
            assert path.exists()
            assert get_head(path) == target
            assert get_current_branch(path) is None

        assert not path.exists()
        assert str(path) not in git(git_repo, "worktree", "list")

    def test_removed_when_block_raises(self, git_repo):
        """Test that the worktree is removed on error."""
        with pytest.raises(RuntimeError):
            with isolated_worktree(git_repo, "HEAD") as path:
                raise RuntimeError("boom")

        assert not path.exists()

    def test_remove_falls_back_to_delete(self, git_repo, mocker):
        """Test that a failing 'git worktree remove' falls back to deleting."""
        path = git_repo.parent / "wt"
        git(git_repo, "worktree", "add", "--detach", "--quiet", str(path), "HEAD")

        real_run = _run_git_command

        def failing_remove(args, cwd=None, env=None):
            if args[:2] == ["worktree", "remove"]:
                raise GitError("cannot remove")
            return real_run(args, cwd=cwd, env=env)

        mocker.patch("codeboss.git.worktree._run_git_command", side_effect=failing_remove)

        remove_worktree(git_repo, path)

        assert not path.exists()
        assert str(path) not in git(git_repo, "worktree", "list")

    def test_remove_never_raises(self, temp_dir, mocker):
        """Test that cleanup failures are swallowed."""
        mocker.patch("codeboss.git.worktree._run_git_command", side_effect=GitError("nope"))

        remove_worktree(temp_dir, temp_dir / "missing")


class TestAmendMessage:
    """Tests for amend_message function."""

    def test_amend_sets_message_and_dates(self, git_repo):
        """Test that message, dates and committer are forced."""
        before = get_commit_info(git_repo, "HEAD")

        new_sha = amend_message(git_repo, "Bossed", 1600000000, "-0500", "Ada", "ada@example.com")

        after = get_commit_info(git_repo, new_sha)
        assert git(git_repo, "log", "-1", "--format=%B").strip() == "Bossed"
        assert after.tree == before.tree
        assert after.parent == before.parent
        assert after.author_timestamp == 1600000000
        assert after.author_timezone == "-0500"
        assert after.committer_date == "1600000000 -0500"
        assert git(git_repo, "log", "-1", "--format=%cn <%ce>") == "Ada <ada@example.com>"
        assert get_head(git_repo) == new_sha

    def test_amend_is_deterministic(self, git_repo):
        """Test that the same inputs give the same commit id."""
        first = amend_message(git_repo, "Same", 1600000000, "+0000", "Test User", "test@example.com")
        second = amend_message(git_repo, "Same", 1600000000, "+0000", "Test User", "test@example.com")

        assert first == second

    def test_message_stored_verbatim(self, git_repo):
        """Test that comment-like lines and blank lines are not cleaned up."""
        message = "Fix bug\n\n\n# not a comment"

        amend_message(git_repo, message, 1600000000, "+0000", "Test User", "test@example.com")

        assert git(git_repo, "log", "-1", "--format=%B") == message


class TestReplayCommit:
    """Tests for replay_commit function."""

    def test_preserve_keeps_dates_and_message(self, git_repo):
        """Test replaying a commit onto its parent in PRESERVE mode."""
        head = get_commit_info(git_repo, "HEAD")
        reset_hard(git_repo, head.parent)

        new_sha = replay_commit(git_repo, head, TimeMode.PRESERVE)

        replayed = get_commit_info(git_repo, new_sha)
        assert replayed.tree == head.tree
        assert replayed.author_timestamp == head.author_timestamp
        assert replayed.committer_date == head.committer_date
        assert git(git_repo, "log", "-1", "--format=%s") == "Add c"
        # Nothing changed, so the commit comes out identical
        assert new_sha == head.sha

    def test_now_uses_given_time(self, git_repo):
        """Test replaying in NOW mode with an explicit time."""
        head = get_commit_info(git_repo, "HEAD")
        reset_hard(git_repo, head.parent)

        new_sha = replay_commit(git_repo, head, TimeMode.NOW, now="1800000000 +0000")

        replayed = get_commit_info(git_repo, new_sha)
        assert replayed.author_timestamp == 1800000000
        assert replayed.committer_timestamp == 1800000000
        assert replayed.tree == head.tree

    def test_conflict_raises(self, git_repo):
        """Test that a conflicting replay raises ReplayConflictError."""
        git(git_repo, "checkout", "--quiet", "-b", "other", "HEAD~1")
        commit_file(git_repo, "c.txt", "other\n", "Conflicting c", BASE_TIMESTAMP + 200)
        conflicting = get_commit_info(git_repo, "HEAD")
        git(git_repo, "checkout", "--quiet", "main")

        with pytest.raises(ReplayConflictError) as exc_info:
            replay_commit(git_repo, conflicting, TimeMode.PRESERVE)

        assert conflicting.sha[:7] in str(exc_info.value)
        assert isinstance(exc_info.value, GitError)
