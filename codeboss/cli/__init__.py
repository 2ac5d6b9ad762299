"""CLI entry point for codeboss.

This module provides the main CLI application that combines all commands
and subcommands into a single unified interface.
"""

import typer

from codeboss.cli.config import config_app
from codeboss.cli.boss import boss_command
from codeboss.cli.rebase import rebase_command, rebase_all_command
from codeboss.cli.history import history_command
from codeboss.cli.check import check_command
from codeboss.cli.main import main_command

# Main application
app = typer.Typer(
    name="codeboss",
    help="codeboss: vanity git commit hash miner",
    add_completion=False,
    no_args_is_help=True,
)

# Add subcommand groups
app.add_typer(config_app, name="config")

# Add individual commands
app.command("boss")(boss_command)
app.command("rebase")(rebase_command)
app.command("rebase-all")(rebase_all_command)
app.command("history")(history_command)
app.command("check")(check_command)

# Global options (--verbose, --version)
app.callback()(main_command)


__all__ = [
    "app",
    "config_app",
    "boss_command",
    "rebase_command",
    "rebase_all_command",
    "history_command",
    "check_command",
    "main_command",
]
