"""Abstract database interface."""

from abc import ABC, abstractmethod
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

# Import entities directly to avoid circular import through domain/__init__.py
from packflow.domain.entities import BankDetails, Payment, PaymentStatus


class Database(ABC):
    """Abstract database interface for packflow.

    Every payment and bank-details operation is scoped to a user: a record
    belongs to exactly one user and is invisible to all others.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Payment operations
    @abstractmethod
    def create_payment(
        self,
        user_id: str,
        client_name: str,
        total: Decimal,
        created_at: datetime,
        project_name: Optional[str] = None,
        client_email: Optional[str] = None,
        client_phone: Optional[str] = None,
        work_period_start: Optional[date] = None,
        work_period_end: Optional[date] = None,
        hours_worked: Decimal = Decimal("0"),
        rate: Decimal = Decimal("0"),
        additional_fees: Decimal = Decimal("0"),
        subtotal: Decimal = Decimal("0"),
    ) -> int:
        """Create a pending payment. Returns payment ID."""
        pass

    @abstractmethod
    def get_payment(self, user_id: str, payment_id: int) -> Optional[Payment]:
        """Get a user's payment by ID."""
        pass

    @abstractmethod
    def list_payments(self, user_id: str) -> list[Payment]:
        """List a user's payments, newest first."""
        pass

    @abstractmethod
    def update_payment_status(
        self,
        user_id: str,
        payment_id: int,
        status: PaymentStatus,
        updated_at: datetime,
        accepted_at: Optional[datetime] = None,
    ) -> Optional[Payment]:
        """Update payment status. Returns None if the user has no such payment.

        accepted_at is only written when given.
        """
        pass

    @abstractmethod
    def delete_payment(self, user_id: str, payment_id: int) -> bool:
        """Delete a user's payment. Returns False if nothing was deleted."""
        pass

    # Bank details operations
    @abstractmethod
    def get_bank_details(self, user_id: str) -> Optional[BankDetails]:
        """Get bank details for a user."""
        pass

    @abstractmethod
    def upsert_bank_details(
        self,
        user_id: str,
        account_name: str,
        account_number: str,
        sort_code: str,
        timestamp: datetime,
    ) -> BankDetails:
        """Insert or update the user's bank details."""
        pass
