"""Bank details commands."""

import click

from packflow.cli.error_handling import handle_domain_error
from packflow.domain.bank_details import BankDetailsService, format_sort_code


@click.group()
def bank_group():
    """Manage the bank details shown on payment requests."""
    pass


@bank_group.command("show")
@click.pass_context
def show_bank_details(ctx):
    """Show saved bank details."""
    service = BankDetailsService(ctx.obj["db"])
    details = service.get(ctx.obj["user_id"])
    if details is None:
        click.echo("No bank details saved.")
        return

    click.echo(f"Account name:   {details.account_name}")
    click.echo(f"Account number: {details.account_number}")
    click.echo(f"Sort code:      {format_sort_code(details.sort_code)}")


@bank_group.command("set")
@click.argument("account_name", metavar="ACCOUNT_NAME")
@click.argument("account_number", metavar="ACCOUNT_NUMBER")
@click.argument("sort_code", metavar="SORT_CODE")
@click.pass_context
def set_bank_details(ctx, account_name: str, account_number: str, sort_code: str):
    """Save bank details, replacing any existing ones.

    Examples:
        packflow bank set "J Smith" 12345678 12-34-56
    """
    service = BankDetailsService(ctx.obj["db"])
    try:
        details = service.upsert(
            ctx.obj["user_id"],
            account_name=account_name,
            account_number=account_number,
            sort_code=sort_code,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Saved bank details for '{details.account_name}'")


def register_commands(cli):
    """Register bank details commands with main CLI."""
    cli.add_command(bank_group, name="bank")
