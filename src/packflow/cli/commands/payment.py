"""Payment request commands."""

import click

from packflow.cli.error_handling import handle_domain_error
from packflow.cli.sms_setup import build_sms_service
from packflow.domain.entities import Payment, PaymentStatus, StatementOfWork
from packflow.domain.errors import DomainError
from packflow.domain.payment import PaymentService
from packflow.utils.amount_parser import parse_amount
from packflow.utils.date_parser import parse_date

STATUS_CHOICES = [status.value for status in PaymentStatus]


def _parse_period(ctx, start_date: str | None, end_date: str | None):
    start = end = None
    try:
        if start_date:
            start = parse_date(start_date)
        if end_date:
            end = parse_date(end_date)
    except ValueError as e:
        click.echo(f"Error: Invalid work period date: {e}", err=True)
        ctx.exit(1)
    return start, end


def _notify_client(ctx, payment: Payment) -> None:
    """Send the payment-request SMS; failure does not undo the payment."""
    if not payment.client_phone:
        click.echo("No phone number provided - SMS notification not sent.")
        return
    try:
        service = build_sms_service(ctx)
        service.notify_payment_request(payment)
        click.echo(f"SMS notification sent to {payment.client_phone}")
    except DomainError as e:
        click.echo(f"Note: SMS notification failed - {e}", err=True)


def _echo_created(ctx, payment_id: int, notify: bool) -> None:
    user_id = ctx.obj["user_id"]
    payment = PaymentService(ctx.obj["db"]).get_payment(user_id, payment_id)
    click.echo(
        f"Created payment request {payment.id} for '{payment.client_name}': "
        f"${payment.total:,.2f}"
    )
    if notify:
        _notify_client(ctx, payment)


@click.group()
def payment_group():
    """Manage payment requests."""
    pass


@payment_group.command("create")
@click.argument("client_name", metavar="CLIENT_NAME")
@click.argument("total", metavar="TOTAL")
@click.option("--project", help="Project name")
@click.option("--email", help="Client email")
@click.option("--phone", help="Client mobile number for SMS notification")
@click.option("--start-date", help="Start of the billed work period")
@click.option("--end-date", help="End of the billed work period")
@click.option("--notify", is_flag=True, help="Send the client an SMS about the request")
@click.pass_context
def create_payment(
    ctx,
    client_name: str,
    total: str,
    project: str | None,
    email: str | None,
    phone: str | None,
    start_date: str | None,
    end_date: str | None,
    notify: bool,
):
    """Create a payment request for a fixed total.

    Examples:
        packflow payment create "Acme Ltd" 450.00 --project "Kitchen refit"
        packflow payment create "Jane Smith" "$1,200" --phone 07123456789 --notify
    """
    service = PaymentService(ctx.obj["db"])
    start, end = _parse_period(ctx, start_date, end_date)

    try:
        payment_id = service.create_payment(
            user_id=ctx.obj["user_id"],
            client_name=client_name,
            total=parse_amount(total),
            project_name=project,
            client_email=email,
            client_phone=phone,
            work_period_start=start,
            work_period_end=end,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
        return

    _echo_created(ctx, payment_id, notify)


@payment_group.command("from-sow")
@click.argument("client_name", metavar="CLIENT_NAME")
@click.option("--hours", "hours_worked", default="0", help="Hours worked")
@click.option("--rate", default="0", help="Hourly rate")
@click.option("--fees", "additional_fees", default="0", help="Additional fees")
@click.option("--project", default="", help="Project name")
@click.option("--email", default="", help="Client email")
@click.option("--phone", default="", help="Client mobile number for SMS notification")
@click.option("--start-date", help="Start of the billed work period")
@click.option("--end-date", help="End of the billed work period")
@click.option("--notify", is_flag=True, help="Send the client an SMS about the request")
@click.pass_context
def create_from_sow(
    ctx,
    client_name: str,
    hours_worked: str,
    rate: str,
    additional_fees: str,
    project: str,
    email: str,
    phone: str,
    start_date: str | None,
    end_date: str | None,
    notify: bool,
):
    """Create a payment request from a statement of work.

    The total is hours x rate plus additional fees.

    Examples:
        packflow payment from-sow "Acme Ltd" --hours 12.5 --rate 40 --fees 25
    """
    service = PaymentService(ctx.obj["db"])
    start, end = _parse_period(ctx, start_date, end_date)

    sow = StatementOfWork(
        client_name=client_name,
        project_name=project,
        client_email=email,
        client_phone=phone,
        start_date=start,
        end_date=end,
        hours_worked=hours_worked,
        rate=rate,
        additional_fees=additional_fees,
    )
    try:
        payment_id = service.create_from_sow(ctx.obj["user_id"], sow)
    except ValueError as e:
        handle_domain_error(ctx, e)
        return

    _echo_created(ctx, payment_id, notify)


@payment_group.command("list")
@click.option("--status", type=click.Choice(STATUS_CHOICES), help="Only show this status")
@click.pass_context
def list_payments(ctx, status: str | None):
    """List payment requests, newest first."""
    service = PaymentService(ctx.obj["db"])
    payments = service.list_payments(ctx.obj["user_id"], status=status)
    if not payments:
        click.echo("No payments found.")
        return

    click.echo("\nPayments:")
    click.echo("-" * 80)
    for p in payments:
        project = p.project_name or "Untitled"
        click.echo(
            f"ID: {p.id:3d} | {p.created_at:%Y-%m-%d} | {p.client_name[:20]:20s} | "
            f"{project[:20]:20s} | ${p.total:>10,.2f} | {p.status.value}"
        )


@payment_group.command("status")
@click.argument("payment_id", type=int)
@click.argument("status", type=click.Choice(STATUS_CHOICES))
@click.pass_context
def update_status(ctx, payment_id: int, status: str):
    """Set the status of a payment request.

    Examples:
        packflow payment status 3 accepted
        packflow payment status 4 paid
    """
    service = PaymentService(ctx.obj["db"])
    try:
        payment = service.update_status(ctx.obj["user_id"], payment_id, status)
    except ValueError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Payment {payment.id} marked {payment.status.value}")


@payment_group.command("delete")
@click.argument("payment_id", type=int)
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_payment(ctx, payment_id: int, yes: bool):
    """Delete a payment request."""
    service = PaymentService(ctx.obj["db"])
    user_id = ctx.obj["user_id"]
    try:
        payment = service.get_payment(user_id, payment_id)
    except ValueError as e:
        handle_domain_error(ctx, e)
        return

    if not yes and not click.confirm(
        f"Are you sure you want to delete payment {payment.id} for '{payment.client_name}'?"
    ):
        click.echo("Deletion cancelled.")
        return

    service.delete_payment(user_id, payment_id)
    click.echo(f"Deleted payment {payment_id}")


def register_commands(cli):
    """Register payment commands with main CLI."""
    cli.add_command(payment_group, name="payment")
