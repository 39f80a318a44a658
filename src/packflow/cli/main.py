"""Main CLI entry point."""

import logging

import click

from packflow.config import Settings
from packflow.database.factories import create_sqlite_database
from packflow.domain.errors import ConfigurationError

# Import and register all commands at module level
from packflow.cli.commands import (
    payment,
    bank,
    metrics,
    sms,
)

DEFAULT_USER = "local"


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides PACKFLOW_DB_PATH environment variable)",
    envvar="PACKFLOW_DB_PATH",
)
@click.option(
    "--user",
    "user_id",
    default=DEFAULT_USER,
    show_default=True,
    help="Acting user ID (overrides PACKFLOW_USER environment variable)",
    envvar="PACKFLOW_USER",
)
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx, db_path: str | None, user_id: str, verbose: bool):
    """PackFlow - Payment requests for contractors.

    Turn a statement of work into a payment request, notify the client by
    SMS, track payment status and review revenue metrics.
    """
    ctx.ensure_object(dict)
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        settings = Settings.from_env()
    except ConfigurationError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)
    ctx.obj["settings"] = settings
    ctx.obj["user_id"] = user_id

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


# Register all commands
payment.register_commands(cli)
bank.register_commands(cli)
metrics.register_commands(cli)
sms.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
