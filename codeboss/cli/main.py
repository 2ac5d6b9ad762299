"""Top-level CLI callback for codeboss."""

import logging
from typing import Optional

import typer

from codeboss import __version__


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"codeboss {__version__}")
        raise typer.Exit()


def main_command(
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Log git invocations and session transitions",
    ),
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit",
    ),
) -> None:
    """Mine commit messages so commit ids start with a vanity prefix."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s:%(name)s:%(message)s",
    )
