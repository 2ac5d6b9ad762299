"""CLI commands for bossing commits deeper in the history."""

from typing import Optional

import typer

from codeboss.config import TimeMode
from codeboss.cli.utils import command_errors, get_settings, open_rewriter, report_result


def rebase_command(
    commit: str = typer.Argument(..., help="Commit to boss (any ancestor of HEAD, or HEAD)"),
    template: Optional[str] = typer.Argument(
        None,
        help="Message template. Omit to reuse the one saved for this commit.",
    ),
    time: TimeMode = typer.Option(
        ...,
        "--time",
        "-t",
        help="Dates for the bossed and replayed commits: preserve or now",
    ),
) -> None:
    """Boss one commit and replay every commit after it.

    The history from the commit to HEAD must be linear; merge commits are refused.
    """
    with command_errors():
        settings = get_settings()
        with open_rewriter(settings) as rewriter:
            result = rewriter.rebase_one(commit, template, time)
        report_result(result, settings.target)


def rebase_all_command(
    time: TimeMode = typer.Option(
        ...,
        "--time",
        "-t",
        help="Dates for the bossed and replayed commits: preserve or now",
    ),
) -> None:
    """Re-boss every commit on the branch using saved templates.

    Commits that already carry the prefix are skipped. Nothing is rewritten
    unless every other commit has a saved template with enough entropy. Branches
    containing merge commits are refused.
    """
    with command_errors():
        settings = get_settings()
        with open_rewriter(settings) as rewriter:
            batch = rewriter.rebase_all(time)

        typer.echo("")
        if not batch.rewritten:
            typer.echo("Nothing to boss.")
        else:
            typer.echo(f"✓ Bossed {len(batch.rewritten)} commit(s); HEAD is now {batch.head[:7]}")
        if batch.skipped:
            typer.echo(f"Skipped: {', '.join(batch.skipped)}")
        if batch.unbossed:
            typer.echo(
                f"Warning: {len(batch.unbossed)} commit(s) lack the prefix: {', '.join(batch.unbossed)}. "
                "Run 'codeboss rebase-all' again.",
                err=True,
            )
