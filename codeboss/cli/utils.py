"""Shared utility functions for CLI commands."""

from contextlib import contextmanager
from typing import Iterator

import typer

from codeboss.config import ConfigError, Settings
from codeboss.engine import HistoryRewriter, RewriteResult
from codeboss.entropy import format_entropy_error
from codeboss.exceptions import CodebossError, InsufficientEntropyError
from codeboss.git import GitError, ReplayConflictError, get_repo_root
from codeboss.global_config import GlobalConfigError
from codeboss.mining import FailureReason, GcloudSession, MiningClient, MiningError
from codeboss.store import BossificationStore

# Exit status for templates rejected for insufficient entropy
EXIT_ENTROPY = 2


def echo_progress(message: str) -> None:
    """Print a progress line to stderr."""
    typer.echo(message, err=True)


def get_settings() -> Settings:
    """Load the effective settings.

    Raises:
        ConfigError: If the configuration is invalid.
    """
    from codeboss.config import load_config
    return load_config()


@contextmanager
def command_errors() -> Iterator[None]:
    """Turn codeboss exceptions into stderr messages and exit codes.

    Insufficient entropy, whether found locally or reported by the search
    program, exits with status 2. Every other failure exits with status 1.
    """
    try:
        yield
    except InsufficientEntropyError as e:
        if str(e) != "Not enough entropy":
            typer.echo(f"Error: {e}", err=True)
        typer.echo(format_entropy_error(e.assessment), err=True)
        raise typer.Exit(EXIT_ENTROPY)
    except MiningError as e:
        typer.echo(f"Error: {e}", err=True)
        if e.reason is FailureReason.INSUFFICIENT_ENTROPY:
            raise typer.Exit(EXIT_ENTROPY)
        raise typer.Exit(1)
    except ReplayConflictError as e:
        typer.echo(f"Error: {e}", err=True)
        typer.echo(
            "The branch is left partway through the replay. Run 'git reset --merge' "
            "to drop the conflicted changes and keep the branch where it stopped.",
            err=True,
        )
        raise typer.Exit(1)
    except (CodebossError, GitError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)
    except (ConfigError, GlobalConfigError) as e:
        typer.echo(f"Configuration error: {e}", err=True)
        raise typer.Exit(1)


def build_miner(settings: Settings) -> MiningClient:
    """Create the mining client for the configured compute instance."""
    session = GcloudSession(settings.gcp_instance, settings.gcp_zone, echo=echo_progress)
    return MiningClient(session, settings.miner_command)


@contextmanager
def open_rewriter(settings: Settings) -> Iterator[HistoryRewriter]:
    """Yield a HistoryRewriter for the current repository.

    The bossification store is closed when the block exits, however it exits.
    """
    repo_root = get_repo_root()
    with BossificationStore(settings.db_path) as store:
        yield HistoryRewriter(
            repo_root,
            store,
            build_miner(settings),
            settings,
            echo=echo_progress,
        )


def report_result(result: RewriteResult, target: str) -> None:
    """Print the outcome of a single rewrite."""
    typer.echo("")
    typer.echo(f"Message: {result.message}")
    typer.echo(f"Commit:  {result.old_sha[:7]} -> {result.new_sha}")
    if result.replayed:
        typer.echo(f"Replayed {len(result.replayed)} commit(s); HEAD is now {result.head[:7]}")
    if result.achieved:
        typer.echo(f"✓ Bossed: {result.new_sha[:len(target) + 4]}...")
    else:
        typer.echo(f"Warning: {result.new_sha[:7]} does not start with {target}", err=True)
