"""CLI command for listing saved bossifications."""

import typer

from codeboss.cli.utils import command_errors, get_settings
from codeboss.store import BossificationStore


def history_command() -> None:
    """List every saved template, newest first."""
    with command_errors():
        settings = get_settings()
        with BossificationStore(settings.db_path) as store:
            records = store.list_all()

    if not records:
        typer.echo("No bossifications recorded yet.")
        return

    for record in records:
        typer.echo(
            f"{record.created_at_display}  {record.tree_hash[:7]}  "
            f"{record.author_name} <{record.author_email}>  {record.template}"
        )
