"""SMS commands."""

import click

from packflow.cli.error_handling import handle_domain_error
from packflow.cli.sms_setup import build_sms_service
from packflow.domain.errors import DomainError
from packflow.domain.payment import PaymentService


@click.group()
def sms_group():
    """Send SMS messages."""
    pass


@sms_group.command("send")
@click.argument("recipient", metavar="RECIPIENT")
@click.argument("message", metavar="MESSAGE")
@click.pass_context
def send_sms(ctx, recipient: str, message: str):
    """Send an SMS to a UK mobile number.

    Examples:
        packflow sms send 07123456789 "Your invoice is ready"
        packflow sms send "+44 7123 456789" "Thanks for your payment"
    """
    try:
        result = build_sms_service(ctx).send(recipient, message)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"SMS sent (ID: {result.message_id or 'unknown'}, status: {result.status or 'unknown'})")
    if result.credits is not None:
        click.echo(f"Credits remaining: {result.credits}")


@sms_group.command("notify")
@click.argument("payment_id", type=int)
@click.pass_context
def notify_payment(ctx, payment_id: int):
    """Send the payment-request SMS for an existing payment."""
    try:
        payment = PaymentService(ctx.obj["db"]).get_payment(ctx.obj["user_id"], payment_id)
        build_sms_service(ctx).notify_payment_request(payment)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"SMS notification sent to {payment.client_phone}")


def register_commands(cli):
    """Register SMS commands with main CLI."""
    cli.add_command(sms_group, name="sms")
