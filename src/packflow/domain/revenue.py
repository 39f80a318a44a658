"""Revenue time-series aggregation.

Everything here is a pure function over an in-memory snapshot of payments.
The only non-deterministic input is the wall clock, which every operation
takes as an optional ``now`` argument (a datetime or a zero-argument
callable).

All bucketing and range filtering uses a payment's effective date: the
acceptance timestamp when present, otherwise the creation timestamp.
"""

import logging
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Callable, Iterable, Optional, Sequence

from dateutil.relativedelta import relativedelta

from packflow.domain.entities import (
    BucketPoint,
    CardMetrics,
    ChartPoint,
    ClientRevenue,
    Granularity,
    Payment,
    PaymentStatus,
    RevenueRange,
    RevenueSummary,
)
from packflow.utils.amount_parser import coerce_amount
from packflow.utils.date_parser import Clock, parse_timestamp, resolve_now

logger = logging.getLogger(__name__)

RealizedPredicate = Callable[[Payment], bool]

DEFAULT_GRANULARITY = Granularity.WEEKS
DEFAULT_RANGE = RevenueRange.LAST_12_WEEKS
DEFAULT_MAX_BUCKETS = 5000
DEFAULT_REALIZED_STATUSES = frozenset({PaymentStatus.ACCEPTED, PaymentStatus.PAID})
DEFAULT_CHART_PADDING = {"top": 20, "right": 40, "bottom": 60, "left": 80}

_ZERO = Decimal("0")

_RANGE_LOOKBACK = {
    RevenueRange.LAST_24_HOURS: timedelta(hours=24),
    RevenueRange.LAST_7_DAYS: timedelta(days=7),
    RevenueRange.LAST_12_WEEKS: timedelta(weeks=12),
    RevenueRange.LAST_12_MONTHS: relativedelta(months=12),
}

_STEPS = {
    Granularity.HOURS: timedelta(hours=1),
    Granularity.DAYS: timedelta(days=1),
    Granularity.WEEKS: timedelta(weeks=1),
    Granularity.MONTHS: relativedelta(months=1),
}

_KEY_FORMATS = {
    Granularity.HOURS: "%Y-%m-%dT%H",
    Granularity.DAYS: "%Y-%m-%d",
    Granularity.WEEKS: "%Y-%m-%d",
    Granularity.MONTHS: "%Y-%m",
}


def parse_granularity(value) -> Granularity:
    """Parse a granularity selector, falling back to weeks."""
    if isinstance(value, Granularity):
        return value
    try:
        return Granularity(str(value).strip().lower())
    except ValueError:
        logger.debug("Unknown granularity %r, using %s", value, DEFAULT_GRANULARITY.value)
        return DEFAULT_GRANULARITY


def parse_range(value) -> RevenueRange:
    """Parse a range selector, falling back to the last 12 weeks."""
    if isinstance(value, RevenueRange):
        return value
    try:
        return RevenueRange(str(value).strip().lower())
    except ValueError:
        logger.debug("Unknown range %r, using %s", value, DEFAULT_RANGE.value)
        return DEFAULT_RANGE


def parse_date_range_days(value) -> Optional[int]:
    """Parse a trailing-days selector. None means no cutoff ("all")."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value > 0 else None
    text = str(value).strip().lower()
    if not text or text == "all":
        return None
    try:
        days = int(text)
    except ValueError:
        logger.debug("Unknown date range %r, using all", value)
        return None
    return days if days > 0 else None


def payment_status(record: Payment) -> Optional[PaymentStatus]:
    """The record's status, or None if it is not a known status."""
    try:
        return PaymentStatus(record.status)
    except ValueError:
        return None


def realized_predicate(statuses: Optional[Iterable] = None) -> RealizedPredicate:
    """Build the predicate deciding which payments count as realized revenue.

    Args:
        statuses: Status values that count as realized. Defaults to
            accepted and paid.

    Raises:
        ValueError: If a status value is not a known payment status
    """
    if statuses is None:
        allowed = DEFAULT_REALIZED_STATUSES
    else:
        allowed = frozenset(PaymentStatus(status) for status in statuses)

    def is_realized(record: Payment) -> bool:
        return payment_status(record) in allowed

    return is_realized


def effective_date(record: Payment) -> Optional[datetime]:
    """Acceptance timestamp if known, otherwise creation timestamp."""
    accepted = parse_timestamp(record.accepted_at)
    if accepted is not None:
        return accepted
    return parse_timestamp(record.created_at)


def range_start(
    records: Sequence[Payment], revenue_range: RevenueRange, end: datetime
) -> datetime:
    """Start of the lookback window ending at ``end``.

    ``all`` starts at the earliest effective date among ``records``, or at
    ``end`` when there are none.
    """
    if revenue_range == RevenueRange.ALL:
        dates = [d for d in (effective_date(r) for r in records) if d is not None]
        return min(dates) if dates else end
    return end - _RANGE_LOOKBACK[revenue_range]


def truncate(value: datetime, granularity: Granularity) -> datetime:
    """Start of the bucket containing ``value``."""
    if granularity == Granularity.HOURS:
        return value.replace(minute=0, second=0, microsecond=0)
    day = value.replace(hour=0, minute=0, second=0, microsecond=0)
    if granularity == Granularity.DAYS:
        return day
    if granularity == Granularity.WEEKS:
        # weekday() is 0 on Monday and 6 on Sunday
        return day - timedelta(days=day.weekday())
    return day.replace(day=1)


def bucket_key(start: datetime, granularity: Granularity) -> str:
    """Sortable key of the bucket starting at ``start``."""
    return start.strftime(_KEY_FORMATS[granularity])


def bucket_label(start: datetime, granularity: Granularity) -> str:
    """Display label of the bucket starting at ``start``."""
    if granularity == Granularity.HOURS:
        return start.strftime("%b %d, %H:00")
    if granularity == Granularity.MONTHS:
        return start.strftime("%b %Y")
    day_label = f"{start:%b} {start.day}, {start.year}"
    if granularity == Granularity.WEEKS:
        return f"Week of {day_label}"
    return day_label


def generate_buckets(
    start: datetime,
    end: datetime,
    granularity: Granularity,
    max_buckets: Optional[int] = DEFAULT_MAX_BUCKETS,
) -> list[tuple[datetime, datetime]]:
    """Generate the dense, ascending bucket intervals covering [start, end].

    When more than ``max_buckets`` buckets would be needed, only the most
    recent ``max_buckets`` are generated.
    """
    step = _STEPS[granularity]
    current = truncate(start, granularity)
    last = truncate(end, granularity)

    if max_buckets is not None and max_buckets > 0:
        try:
            earliest = last - step * (max_buckets - 1)
        except (OverflowError, ValueError):
            earliest = None
        if earliest is not None and current < earliest:
            logger.warning(
                "Revenue series at %s granularity needs more than %d buckets; "
                "starting at %s instead of %s",
                granularity.value,
                max_buckets,
                earliest.isoformat(),
                current.isoformat(),
            )
            current = earliest

    buckets = []
    while current <= last:
        following = current + step
        buckets.append((current, following))
        current = following
    return buckets


def series_window(
    records: Sequence[Payment],
    granularity: Granularity,
    revenue_range: RevenueRange,
    end: datetime,
    max_buckets: Optional[int] = DEFAULT_MAX_BUCKETS,
) -> tuple[datetime, list[tuple[datetime, datetime]]]:
    """Effective window start and bucket intervals for a series.

    The start moves forward when ``max_buckets`` cuts off the oldest
    buckets, so records before the first kept bucket fall outside.
    """
    start = range_start(records, revenue_range, end)
    spans = generate_buckets(start, end, granularity, max_buckets)
    if spans and spans[0][0] > start:
        start = spans[0][0]
    return start, spans


def _in_window(record: Payment, start: datetime, end: datetime) -> bool:
    when = effective_date(record)
    return when is not None and start <= when <= end


def _sum_totals(records: Iterable[Payment]) -> Decimal:
    return sum((coerce_amount(r.total) for r in records), _ZERO)


def compute_series(
    records: Iterable[Payment],
    granularity=DEFAULT_GRANULARITY,
    revenue_range=DEFAULT_RANGE,
    now: Clock = None,
    max_buckets: Optional[int] = DEFAULT_MAX_BUCKETS,
) -> list[BucketPoint]:
    """Bucket realized revenue into a gap-filled time series.

    ``records`` must already be restricted to the payments that count as
    revenue; every one of them inside the window is summed.

    Args:
        records: Payments to sum
        granularity: Bucket width (hours, days, weeks, months)
        revenue_range: Lookback window (24h, 7d, 12w, 12m, all)
        now: Injected clock
        max_buckets: Upper bound on generated buckets, None for unbounded

    Returns:
        Buckets ascending by key, empty buckets included. Empty when there
        are no records at all.
    """
    records = list(records)
    if not records:
        return []

    granularity = parse_granularity(granularity)
    revenue_range = parse_range(revenue_range)
    end = resolve_now(now)
    start, spans = series_window(records, granularity, revenue_range, end, max_buckets)

    totals = {bucket_key(span_start, granularity): _ZERO for span_start, _ in spans}
    for record in records:
        if not _in_window(record, start, end):
            continue
        key = bucket_key(truncate(effective_date(record), granularity), granularity)
        if key not in totals:
            logger.debug("No %s bucket %s for payment %s", granularity.value, key, record.id)
            continue
        totals[key] += coerce_amount(record.total)

    points = [
        BucketPoint(
            key=bucket_key(span_start, granularity),
            label=bucket_label(span_start, granularity),
            start=span_start,
            end=span_end,
            revenue=totals[bucket_key(span_start, granularity)],
        )
        for span_start, span_end in spans
    ]
    return sorted(points, key=lambda point: point.key)


def compute_summary(
    records: Iterable[Payment],
    revenue_range=DEFAULT_RANGE,
    now: Clock = None,
    granularity=None,
    max_buckets: Optional[int] = None,
) -> RevenueSummary:
    """Total, count and average of the records inside the range.

    Given the ``granularity`` and ``max_buckets`` of a series, the summary
    covers the same effective window as ``compute_series``.
    """
    records = list(records)
    revenue_range = parse_range(revenue_range)
    end = resolve_now(now)
    if granularity is None:
        start = range_start(records, revenue_range, end)
    else:
        start, _ = series_window(
            records, parse_granularity(granularity), revenue_range, end, max_buckets
        )

    in_range = [r for r in records if _in_window(r, start, end)]
    total = _sum_totals(in_range)
    count = len(in_range)
    return RevenueSummary(
        total_revenue=total,
        payment_count=count,
        average_payment=total / count if count else _ZERO,
    )


def matches_client(record: Payment, needle: str) -> bool:
    """Case-insensitive substring match against client name or email."""
    needle = needle.lower()
    return needle in (record.client_name or "").lower() or needle in (
        record.client_email or ""
    ).lower()


def compute_cards(
    records: Iterable[Payment],
    date_range_days=None,
    client_filter: Optional[str] = None,
    now: Clock = None,
    is_realized: Optional[RealizedPredicate] = None,
) -> Optional[CardMetrics]:
    """Compute the card-summary metrics over all of a user's payments.

    The days cutoff and client filter narrow the realized payments only;
    the acceptance rate counts every rejected payment of the user.

    Args:
        records: All payments, any status
        date_range_days: Trailing days cutoff, or None / "all" for no cutoff
        client_filter: Substring matched against client name or email
        now: Injected clock
        is_realized: Predicate for realized revenue (defaults to accepted
            and paid)

    Returns:
        CardMetrics, or None when there is no realized revenue and no client
        filter is active (the user has no data yet).
    """
    end = resolve_now(now)
    days = parse_date_range_days(date_range_days)
    needle = (client_filter or "").strip()
    is_realized = is_realized or realized_predicate()

    records = list(records)
    rejected_count = sum(1 for r in records if payment_status(r) == PaymentStatus.REJECTED)

    realized = [r for r in records if is_realized(r)]
    if days is not None:
        cutoff = end - timedelta(days=days)
        realized = [
            r for r in realized
            if effective_date(r) is not None and effective_date(r) >= cutoff
        ]
    if needle:
        realized = [r for r in realized if matches_client(r, needle)]

    if not realized and not needle:
        return None

    total = _sum_totals(realized)
    count = len(realized)
    decided = count + rejected_count
    return CardMetrics(
        total_revenue=total,
        payment_count=count,
        average_payment=total / count if count else _ZERO,
        acceptance_rate=Decimal(count) * 100 / decided if decided else None,
        total_hours=sum((coerce_amount(r.hours_worked) for r in realized), _ZERO),
    )


def top_clients(records: Iterable[Payment], limit: int = 10) -> list[ClientRevenue]:
    """Clients ranked by revenue, highest first."""
    groups: dict[str, dict] = {}
    for record in records:
        key = record.client_name or record.client_email or "Unknown"
        entry = groups.setdefault(
            key,
            {
                "name": record.client_name or "Unknown",
                "email": record.client_email or "",
                "revenue": _ZERO,
                "count": 0,
            },
        )
        entry["revenue"] += coerce_amount(record.total)
        entry["count"] += 1

    ranked = sorted(groups.values(), key=lambda entry: entry["revenue"], reverse=True)
    return [ClientRevenue(**entry) for entry in ranked[:limit]]


def recent_payments(records: Iterable[Payment], limit: int = 10) -> list[Payment]:
    """Payments ordered by effective date, most recent first."""
    return sorted(
        records,
        key=lambda record: effective_date(record) or datetime.min,
        reverse=True,
    )[:limit]


def layout_chart_points(
    series: Sequence[BucketPoint],
    width: int = 800,
    height: int = 400,
    padding: Optional[dict[str, int]] = None,
) -> list[ChartPoint]:
    """Place series points on a line chart's plot area.

    A single point gets the full plot width as its spacing, so it sits on
    the left edge instead of dividing by zero.
    """
    padding = {**DEFAULT_CHART_PADDING, **(padding or {})}
    plot_width = width - padding["left"] - padding["right"]
    plot_height = height - padding["top"] - padding["bottom"]
    max_revenue = max([float(point.revenue) for point in series] + [1.0])
    spacing = plot_width / (len(series) - 1 or 1)

    return [
        ChartPoint(
            x=padding["left"] + spacing * index,
            y=padding["top"] + plot_height - (float(point.revenue) / max_revenue) * plot_height,
            label=point.label,
            revenue=point.revenue,
        )
        for index, point in enumerate(series)
    ]
