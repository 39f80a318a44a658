"""CLI error handling helpers."""

import click

from packflow.domain.errors import DomainError, SmsGatewayError


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain error and exit with failure.

    SMS gateway errors also list the per-field errors the gateway returned.
    """
    click.echo(f"Error: {error}", err=True)
    if isinstance(error, SmsGatewayError) and error.details:
        details = error.details if isinstance(error.details, list) else [error.details]
        for detail in details:
            click.echo(f"  {detail}", err=True)
    ctx.exit(1)
