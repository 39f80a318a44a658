"""Revenue metrics commands."""

from pathlib import Path

import click

from packflow.cli.charts import render_svg_chart, render_text_chart
from packflow.domain.entities import Granularity, RevenueRange
from packflow.domain.metrics import MetricsService

GRANULARITY_HELP = ", ".join(g.value for g in Granularity)
RANGE_HELP = ", ".join(r.value for r in RevenueRange)


def _metrics_service(ctx) -> MetricsService:
    settings = ctx.obj["settings"]
    return MetricsService(
        ctx.obj["db"],
        is_realized=settings.realized_predicate(),
        max_buckets=settings.max_buckets,
    )


@click.group()
def metrics_group():
    """Show revenue metrics from realized payments."""
    pass


@metrics_group.command("cards")
@click.option("--days", default="all", help="Only payments from the last N days (or 'all')")
@click.option("--client", help="Filter by client name or email (case-insensitive)")
@click.pass_context
def show_cards(ctx, days: str, client: str | None):
    """Show headline metrics: revenue, count, average, acceptance rate, hours.

    Examples:
        packflow metrics cards
        packflow metrics cards --days 30 --client acme
    """
    service = _metrics_service(ctx)
    metrics = service.cards(ctx.obj["user_id"], date_range_days=days, client_filter=client)
    if metrics is None:
        click.echo(
            "No accepted payments yet. Create a payment request and mark it as "
            "accepted to see metrics."
        )
        return

    for card in metrics.cards():
        click.echo(f"{card.label:<26} {card.value:>14}")


@metrics_group.command("revenue")
@click.option(
    "--granularity",
    default=Granularity.WEEKS.value,
    show_default=True,
    help=f"Bucket width: {GRANULARITY_HELP}",
)
@click.option(
    "--range",
    "revenue_range",
    default=RevenueRange.LAST_12_WEEKS.value,
    show_default=True,
    help=f"Lookback window: {RANGE_HELP}",
)
@click.option("--client", help="Filter by client name or email (case-insensitive)")
@click.option("--chart", is_flag=True, help="Draw a bar chart instead of a table")
@click.option("--svg", "svg_path", type=click.Path(dir_okay=False), help="Write an SVG line chart")
@click.pass_context
def show_revenue(
    ctx,
    granularity: str,
    revenue_range: str,
    client: str | None,
    chart: bool,
    svg_path: str | None,
):
    """Show revenue over time.

    Unknown granularity or range values fall back to weeks over 12 weeks.

    Examples:
        packflow metrics revenue --granularity days --range 7d
        packflow metrics revenue --granularity months --range all --chart
    """
    service = _metrics_service(ctx)
    report = service.revenue_report(
        ctx.obj["user_id"],
        granularity=granularity,
        revenue_range=revenue_range,
        client_filter=client,
    )

    summary = report.summary
    click.echo(f"Total Revenue: ${summary.total_revenue:,.2f}")
    click.echo(f"Payments:      {summary.payment_count}")
    click.echo(f"Average:       ${summary.average_payment:,.2f}")
    click.echo()

    if not report.series:
        click.echo("No accepted revenue in this period")
        return

    click.echo(
        f"Revenue by {report.granularity.value} ({report.revenue_range.value}):"
    )
    if chart:
        for line in render_text_chart(report.series):
            click.echo(line)
    else:
        for point in report.series:
            click.echo(f"{point.label:<28} ${point.revenue:>12,.2f}")

    if svg_path:
        Path(svg_path).write_text(render_svg_chart(report.series), encoding="utf-8")
        click.echo(f"\nWrote chart to {svg_path}")


@metrics_group.command("clients")
@click.option("--limit", default=10, show_default=True, help="Number of clients")
@click.pass_context
def show_top_clients(ctx, limit: int):
    """Show clients ranked by realized revenue."""
    clients = _metrics_service(ctx).top_clients(ctx.obj["user_id"], limit=limit)
    if not clients:
        click.echo("No data available")
        return

    click.echo(f"{'Client':<30} {'Revenue':>12} {'Count':>6}")
    click.echo("-" * 50)
    for c in clients:
        name = f"{c.name} <{c.email}>" if c.email else c.name
        click.echo(f"{name[:30]:<30} ${c.revenue:>11,.2f} {c.count:>6}")


@metrics_group.command("recent")
@click.option("--limit", default=10, show_default=True, help="Number of payments")
@click.pass_context
def show_recent(ctx, limit: int):
    """Show the most recently realized payments."""
    payments = _metrics_service(ctx).recent_payments(ctx.obj["user_id"], limit=limit)
    if not payments:
        click.echo("No data available")
        return

    for p in payments:
        project = p.project_name or "Untitled"
        click.echo(
            f"{p.effective_at:%Y-%m-%d} | {project[:20]:20s} | {p.client_name[:20]:20s} | "
            f"{p.hours_worked:>6} h | ${p.total:>10,.2f}"
        )


def register_commands(cli):
    """Register metrics commands with main CLI."""
    cli.add_command(metrics_group, name="metrics")
