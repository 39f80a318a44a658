"""Payment domain service."""

import logging
from datetime import date
from decimal import Decimal
from typing import Optional

from packflow.database.base import Database
from packflow.domain.entities import Payment, PaymentStatus, StatementOfWork
from packflow.domain.errors import (
    NotFoundError,
    ValidationError,
    invalid_status,
    payment_not_found,
)
from packflow.utils.amount_parser import coerce_amount
from packflow.utils.date_parser import Clock, resolve_now

logger = logging.getLogger(__name__)


def parse_status(status) -> PaymentStatus:
    """Parse a payment status value.

    Raises:
        ValidationError: If status is not one of pending, accepted, rejected, paid
    """
    if isinstance(status, PaymentStatus):
        return status
    try:
        return PaymentStatus(str(status).strip().lower())
    except ValueError:
        raise ValidationError(invalid_status(str(status)))


def payment_request_message(payment: Payment) -> str:
    """Text of the SMS telling a client about a new payment request."""
    project = payment.project_name or "your project"
    return (
        f"Hi {payment.client_name}, you have a new payment request from PackFlow "
        f'for ${payment.total:,.2f} for "{project}". Please review and approve.'
    )


class PaymentService:
    """Service for managing payment requests."""

    def __init__(self, db: Database, clock: Clock = None):
        """Initialize payment service.

        Args:
            db: Database instance
            clock: Optional clock used for created/accepted timestamps
        """
        self.db = db
        self.clock = clock

    def create_payment(
        self,
        user_id: str,
        client_name: str,
        total,
        project_name: Optional[str] = None,
        client_email: Optional[str] = None,
        client_phone: Optional[str] = None,
        work_period_start: Optional[date] = None,
        work_period_end: Optional[date] = None,
        hours_worked=0,
        rate=0,
        additional_fees=0,
        subtotal=0,
    ) -> int:
        """Create a pending payment request.

        Args:
            user_id: Owning user
            client_name: Client display name (required)
            total: Amount requested (required, must be positive)
            project_name: Optional project name
            client_email: Optional client email
            client_phone: Optional client phone for SMS notification
            work_period_start: Optional start of the billed work
            work_period_end: Optional end of the billed work
            hours_worked: Billed hours
            rate: Hourly rate
            additional_fees: Fees on top of hours x rate
            subtotal: Hours x rate

        Returns:
            Payment ID

        Raises:
            ValidationError: If client name or total is missing or invalid
        """
        client_name = (client_name or "").strip()
        amount = coerce_amount(total)
        if not client_name or amount == 0:
            raise ValidationError("Client name and total are required")
        if amount < 0:
            raise ValidationError("Total must not be negative")
        if work_period_start and work_period_end and work_period_end < work_period_start:
            raise ValidationError("Work period end date is before its start date")

        payment_id = self.db.create_payment(
            user_id=user_id,
            client_name=client_name,
            total=amount,
            created_at=resolve_now(self.clock),
            project_name=project_name or None,
            client_email=client_email or None,
            client_phone=client_phone or None,
            work_period_start=work_period_start,
            work_period_end=work_period_end,
            hours_worked=coerce_amount(hours_worked),
            rate=coerce_amount(rate),
            additional_fees=coerce_amount(additional_fees),
            subtotal=coerce_amount(subtotal),
        )
        logger.info("Created payment %s for user %s", payment_id, user_id)
        return payment_id

    def create_from_sow(self, user_id: str, sow: StatementOfWork) -> int:
        """Create a payment request from a statement of work.

        Subtotal is hours worked times rate; total adds the additional fees.
        Non-numeric inputs count as zero.
        """
        hours_worked = coerce_amount(sow.hours_worked)
        rate = coerce_amount(sow.rate)
        additional_fees = coerce_amount(sow.additional_fees)
        subtotal = hours_worked * rate

        return self.create_payment(
            user_id=user_id,
            client_name=sow.client_name,
            total=subtotal + additional_fees,
            project_name=sow.project_name,
            client_email=sow.client_email,
            client_phone=sow.client_phone,
            work_period_start=sow.start_date,
            work_period_end=sow.end_date,
            hours_worked=hours_worked,
            rate=rate,
            additional_fees=additional_fees,
            subtotal=subtotal,
        )

    def get_payment(self, user_id: str, payment_id: int) -> Payment:
        """Get a payment.

        Raises:
            NotFoundError: If the user has no payment with this ID
        """
        payment = self.db.get_payment(user_id, payment_id)
        if payment is None:
            raise NotFoundError(payment_not_found(payment_id))
        return payment

    def list_payments(self, user_id: str, status=None) -> list[Payment]:
        """List a user's payments, newest first, optionally by status."""
        payments = self.db.list_payments(user_id)
        if status is None:
            return payments
        wanted = parse_status(status)
        return [p for p in payments if p.status == wanted]

    def update_status(self, user_id: str, payment_id: int, status) -> Payment:
        """Move a payment to a new status.

        Accepting a payment stamps its acceptance time.

        Raises:
            ValidationError: If status is unknown
            NotFoundError: If the user has no payment with this ID
        """
        new_status = parse_status(status)
        now = resolve_now(self.clock)
        accepted_at = now if new_status == PaymentStatus.ACCEPTED else None

        payment = self.db.update_payment_status(
            user_id=user_id,
            payment_id=payment_id,
            status=new_status,
            updated_at=now,
            accepted_at=accepted_at,
        )
        if payment is None:
            raise NotFoundError(payment_not_found(payment_id))
        logger.info("Payment %s marked %s", payment_id, new_status.value)
        return payment

    def delete_payment(self, user_id: str, payment_id: int) -> None:
        """Delete a payment.

        Raises:
            NotFoundError: If the user has no payment with this ID
        """
        if not self.db.delete_payment(user_id, payment_id):
            raise NotFoundError(payment_not_found(payment_id))
        logger.info("Deleted payment %s for user %s", payment_id, user_id)
