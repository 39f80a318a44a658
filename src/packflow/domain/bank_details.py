"""Bank details domain service."""

import logging
import re
from typing import Optional

from packflow.database.base import Database
from packflow.domain.entities import BankDetails
from packflow.domain.errors import ValidationError
from packflow.utils.date_parser import Clock, resolve_now

logger = logging.getLogger(__name__)

MAX_ACCOUNT_NAME_LENGTH = 100


def clean_account_number(account_number: str) -> str:
    """Strip whitespace and require exactly 8 digits."""
    cleaned = re.sub(r"\s+", "", account_number or "")
    if not re.fullmatch(r"\d{8}", cleaned):
        raise ValidationError("Account number must be exactly 8 digits")
    return cleaned


def clean_sort_code(sort_code: str) -> str:
    """Strip dashes and whitespace and require exactly 6 digits."""
    cleaned = re.sub(r"[-\s]", "", sort_code or "")
    if not re.fullmatch(r"\d{6}", cleaned):
        raise ValidationError(
            "Sort code must be exactly 6 digits (format: XX-XX-XX or XXXXXX)"
        )
    return cleaned


def format_sort_code(sort_code: str) -> str:
    """Format a 6-digit sort code as XX-XX-XX."""
    return f"{sort_code[0:2]}-{sort_code[2:4]}-{sort_code[4:6]}"


class BankDetailsService:
    """Service for the payee bank details shown on payment requests."""

    def __init__(self, db: Database, clock: Clock = None):
        self.db = db
        self.clock = clock

    def get(self, user_id: str) -> Optional[BankDetails]:
        """Get bank details, or None if the user has not saved any."""
        return self.db.get_bank_details(user_id)

    def upsert(
        self, user_id: str, account_name: str, account_number: str, sort_code: str
    ) -> BankDetails:
        """Create or replace the user's bank details.

        Raises:
            ValidationError: If any field is missing or malformed
        """
        if not account_name or not account_number or not sort_code:
            raise ValidationError(
                "Account name, account number, and sort code are required"
            )

        name = account_name.strip()
        if not name or len(account_name) > MAX_ACCOUNT_NAME_LENGTH:
            raise ValidationError(
                f"Account name must be between 1 and {MAX_ACCOUNT_NAME_LENGTH} characters"
            )

        details = self.db.upsert_bank_details(
            user_id=user_id,
            account_name=name,
            account_number=clean_account_number(account_number),
            sort_code=clean_sort_code(sort_code),
            timestamp=resolve_now(self.clock),
        )
        logger.info("Saved bank details for user %s", user_id)
        return details
