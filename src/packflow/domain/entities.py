"""Domain model entities for packflow.

These are pure data classes representing business concepts, independent of
database schema. The revenue aggregation works on these and never touches
the storage layer.
"""

from dataclasses import dataclass
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional


class PaymentStatus(str, Enum):
    """Lifecycle states of a payment request."""

    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    PAID = "paid"


class Granularity(str, Enum):
    """Bucket width of a revenue series."""

    HOURS = "hours"
    DAYS = "days"
    WEEKS = "weeks"
    MONTHS = "months"


class RevenueRange(str, Enum):
    """Lookback window of a revenue series."""

    LAST_24_HOURS = "24h"
    LAST_7_DAYS = "7d"
    LAST_12_WEEKS = "12w"
    LAST_12_MONTHS = "12m"
    ALL = "all"


@dataclass(frozen=True)
class Payment:
    """Payment request domain entity."""

    id: int
    user_id: str
    client_name: str
    total: Decimal
    status: PaymentStatus
    created_at: datetime
    accepted_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    project_name: Optional[str] = None
    client_email: Optional[str] = None
    client_phone: Optional[str] = None
    work_period_start: Optional[date] = None
    work_period_end: Optional[date] = None
    hours_worked: Decimal = Decimal("0")
    rate: Decimal = Decimal("0")
    additional_fees: Decimal = Decimal("0")
    subtotal: Decimal = Decimal("0")

    @property
    def effective_at(self) -> datetime:
        """Timestamp used for reporting: acceptance date, else creation date."""
        return self.accepted_at if self.accepted_at is not None else self.created_at


@dataclass(frozen=True)
class BankDetails:
    """Bank details domain entity, one per user."""

    id: int
    user_id: str
    account_name: str
    account_number: str
    sort_code: str
    created_at: datetime
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class StatementOfWork:
    """Work summary a payment request is generated from."""

    client_name: str
    project_name: str = ""
    client_email: str = ""
    client_phone: str = ""
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    hours_worked: object = 0
    rate: object = 0
    additional_fees: object = 0


@dataclass(frozen=True)
class BucketPoint:
    """One point of a revenue series: the half-open interval [start, end)."""

    key: str
    label: str
    start: datetime
    end: datetime
    revenue: Decimal


@dataclass(frozen=True)
class RevenueSummary:
    """Range-scoped revenue statistics."""

    total_revenue: Decimal
    payment_count: int
    average_payment: Decimal


@dataclass(frozen=True)
class RevenueReport:
    """Series and summary computed for one filter selection."""

    granularity: Granularity
    revenue_range: RevenueRange
    series: tuple[BucketPoint, ...]
    summary: RevenueSummary


@dataclass(frozen=True)
class MetricsCard:
    """Single labelled value of the card-summary view."""

    label: str
    value: str


@dataclass(frozen=True)
class CardMetrics:
    """Aggregates backing the card-summary view."""

    total_revenue: Decimal
    payment_count: int
    average_payment: Decimal
    acceptance_rate: Optional[Decimal]
    total_hours: Decimal

    @property
    def acceptance_rate_display(self) -> str:
        if self.acceptance_rate is None:
            return "N/A"
        return f"{self.acceptance_rate:.1f}%"

    def cards(self) -> list[MetricsCard]:
        """Render the metrics as display cards."""
        return [
            MetricsCard("Total Accepted Revenue", f"${self.total_revenue:,.2f}"),
            MetricsCard("Accepted Payments Count", str(self.payment_count)),
            MetricsCard("Average Payment Value", f"${self.average_payment:,.2f}"),
            MetricsCard("Acceptance Rate", self.acceptance_rate_display),
            MetricsCard("Total Hours Paid", f"{self.total_hours:.2f}"),
        ]


@dataclass(frozen=True)
class ClientRevenue:
    """Revenue attributed to one client."""

    name: str
    email: str
    revenue: Decimal
    count: int


@dataclass(frozen=True)
class ChartPoint:
    """Plot coordinates of a series point."""

    x: float
    y: float
    label: str
    revenue: Decimal


@dataclass(frozen=True)
class SmsResult:
    """Gateway acknowledgement of a sent message."""

    message_id: Optional[str]
    status: Optional[str]
    credits: Optional[int] = None
