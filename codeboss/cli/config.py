"""CLI commands for configuration management."""

import typer

from codeboss import global_config
from codeboss.config import ENV_VARS, build_settings
from codeboss.cli.utils import command_errors, get_settings

# Subcommand group for configuration management
config_app = typer.Typer(
    name="config",
    help="Manage codeboss configuration in ~/.codeboss/",
    add_completion=False,
)


@config_app.command("show")
def config_show() -> None:
    """Show the effective configuration (defaults, config.yaml and environment)."""
    with command_errors():
        settings = get_settings()
        config_file = global_config.get_config_file_path()

    typer.echo("Current codeboss configuration:")
    typer.echo()
    for key, env_var in ENV_VARS.items():
        typer.echo(f"  {key} ({env_var}): {getattr(settings, key)}")
    typer.echo()
    if global_config.is_configured():
        typer.echo(f"Config file: {config_file}")
    else:
        typer.echo(f"Config file: {config_file} (not created yet)")


@config_app.command("set")
def config_set(
    key: str = typer.Argument(..., help=f"Setting name ({', '.join(ENV_VARS)})"),
    value: str = typer.Argument(..., help="New value"),
) -> None:
    """Save a setting to ~/.codeboss/config.yaml."""
    if key not in ENV_VARS:
        typer.echo(f"Unknown setting: {key}", err=True)
        typer.echo(f"Valid settings: {', '.join(ENV_VARS)}")
        raise typer.Exit(1)

    with command_errors():
        # Validate against the file alone so env overrides can't mask a bad value
        config = global_config.load_global_config()
        config[key] = value
        settings = build_settings(config, environ={})

        # db_path is stored as typed so '~' stays portable
        stored = value if key == "db_path" else getattr(settings, key)
        global_config.set_value(key, stored)

    typer.echo(f"✓ {key} = {stored}")
