"""Metrics domain service."""

from typing import Optional

from packflow.database.base import Database
from packflow.domain import revenue
from packflow.domain.entities import (
    CardMetrics,
    ClientRevenue,
    Payment,
    RevenueReport,
)
from packflow.utils.date_parser import Clock, resolve_now


class MetricsService:
    """Loads a user's payments and runs the revenue aggregation over them."""

    def __init__(
        self,
        db: Database,
        is_realized: Optional[revenue.RealizedPredicate] = None,
        max_buckets: Optional[int] = revenue.DEFAULT_MAX_BUCKETS,
        clock: Clock = None,
    ):
        """Initialize metrics service.

        Args:
            db: Database instance
            is_realized: Predicate for payments that count as revenue
            max_buckets: Upper bound on revenue series length
            clock: Optional clock for the reporting window
        """
        self.db = db
        self.is_realized = is_realized or revenue.realized_predicate()
        self.max_buckets = max_buckets
        self.clock = clock

    def realized_payments(
        self, user_id: str, client_filter: Optional[str] = None
    ) -> list[Payment]:
        """Payments counting as revenue, optionally narrowed to a client."""
        payments = [p for p in self.db.list_payments(user_id) if self.is_realized(p)]
        needle = (client_filter or "").strip()
        if needle:
            payments = [p for p in payments if revenue.matches_client(p, needle)]
        return payments

    def revenue_report(
        self,
        user_id: str,
        granularity=revenue.DEFAULT_GRANULARITY,
        revenue_range=revenue.DEFAULT_RANGE,
        client_filter: Optional[str] = None,
    ) -> RevenueReport:
        """Build the revenue series and its summary for one filter selection."""
        granularity = revenue.parse_granularity(granularity)
        revenue_range = revenue.parse_range(revenue_range)
        now = resolve_now(self.clock)
        payments = self.realized_payments(user_id, client_filter)

        series = revenue.compute_series(
            payments, granularity, revenue_range, now=now, max_buckets=self.max_buckets
        )
        summary = revenue.compute_summary(
            payments,
            revenue_range,
            now=now,
            granularity=granularity,
            max_buckets=self.max_buckets,
        )
        return RevenueReport(
            granularity=granularity,
            revenue_range=revenue_range,
            series=tuple(series),
            summary=summary,
        )

    def cards(
        self,
        user_id: str,
        date_range_days=None,
        client_filter: Optional[str] = None,
    ) -> Optional[CardMetrics]:
        """Card-summary metrics, or None when the user has no revenue yet."""
        return revenue.compute_cards(
            self.db.list_payments(user_id),
            date_range_days=date_range_days,
            client_filter=client_filter,
            now=self.clock,
            is_realized=self.is_realized,
        )

    def top_clients(self, user_id: str, limit: int = 10) -> list[ClientRevenue]:
        """Clients ranked by realized revenue."""
        return revenue.top_clients(self.realized_payments(user_id), limit=limit)

    def recent_payments(self, user_id: str, limit: int = 10) -> list[Payment]:
        """Most recently realized payments."""
        return revenue.recent_payments(self.realized_payments(user_id), limit=limit)
