"""CLI command for bossing the commit at HEAD."""

from typing import Optional

import typer

from codeboss.config import TimeMode
from codeboss.cli.utils import command_errors, get_settings, open_rewriter, report_result


def boss_command(
    template: Optional[str] = typer.Argument(
        None,
        help="Message template, e.g. '{Fix|Fixed} {the |}bug'. Omit to reuse the saved one.",
    ),
    time: TimeMode = typer.Option(
        TimeMode.PRESERVE,
        "--time",
        "-t",
        help="Keep the original author date (preserve) or use the current time (now)",
    ),
) -> None:
    """Rewrite HEAD so its commit id starts with the target prefix."""
    with command_errors():
        settings = get_settings()
        with open_rewriter(settings) as rewriter:
            result = rewriter.amend_head(template, time)
        report_result(result, settings.target)
