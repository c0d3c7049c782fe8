"""CLI error handling helpers."""

import click

from slipcheck.domain.errors import DomainError, InfrastructureError


def handle_domain_error(ctx: click.Context, error: DomainError | InfrastructureError | ValueError) -> None:
    """Render a domain error and exit with failure."""
    click.echo(f"Error: {error}", err=True)
    ctx.exit(1)
