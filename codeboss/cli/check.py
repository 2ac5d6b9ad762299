"""CLI command for checking a template without mining."""

from itertools import islice

import typer

from codeboss.cli.utils import EXIT_ENTROPY, command_errors, get_settings
from codeboss.entropy import format_entropy_error, validate_entropy
from codeboss.template import count_variants, expand_template, parse_template


def check_command(
    template: str = typer.Argument(..., help="Message template to check"),
    samples: int = typer.Option(
        0,
        "--samples",
        "-n",
        min=0,
        help="Also print the first N variants",
    ),
) -> None:
    """Report a template's variant count and whether it has enough entropy.

    Touches neither the repository nor the compute instance.
    """
    with command_errors():
        settings = get_settings()
        nodes = parse_template(template)
        assessment = validate_entropy(
            count_variants(nodes), settings.target_bits, settings.inverse_failure_rate
        )

    typer.echo(f"Target:     {settings.target} ({settings.target_bits} bits)")
    typer.echo(f"Variations: {assessment.variant_count:,} ({assessment.entropy_bits:.1f} bits)")
    typer.echo(
        f"Required:   {assessment.required_variant_count:,} ({assessment.required_entropy_bits:.1f} bits)"
    )

    if samples:
        typer.echo("")
        for variant in islice(expand_template(nodes), samples):
            typer.echo(f"  {variant}")

    if not assessment.is_valid:
        typer.echo("", err=True)
        typer.echo(format_entropy_error(assessment), err=True)
        raise typer.Exit(EXIT_ENTROPY)

    typer.echo("")
    typer.echo("✓ Enough entropy")
