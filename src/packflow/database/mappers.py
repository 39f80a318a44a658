"""Mapper functions to convert SQLAlchemy models to domain entities."""

from decimal import Decimal

from packflow.domain import entities as domain
from packflow.database.models import (
    Payment as ORMPayment,
    BankDetails as ORMBankDetails,
)


def _decimal(value) -> Decimal:
    return Decimal("0") if value is None else Decimal(value)


def payment_to_domain(orm_payment: ORMPayment) -> domain.Payment:
    """Convert SQLAlchemy Payment model to domain Payment entity."""
    return domain.Payment(
        id=orm_payment.id,
        user_id=orm_payment.user_id,
        project_name=orm_payment.project_name,
        client_name=orm_payment.client_name,
        client_email=orm_payment.client_email,
        client_phone=orm_payment.client_phone,
        work_period_start=orm_payment.work_period_start,
        work_period_end=orm_payment.work_period_end,
        hours_worked=_decimal(orm_payment.hours_worked),
        rate=_decimal(orm_payment.rate),
        additional_fees=_decimal(orm_payment.additional_fees),
        subtotal=_decimal(orm_payment.subtotal),
        total=_decimal(orm_payment.total),
        status=domain.PaymentStatus(orm_payment.status),
        created_at=orm_payment.created_at,
        accepted_at=orm_payment.accepted_at,
        updated_at=orm_payment.updated_at,
    )


def bank_details_to_domain(orm_details: ORMBankDetails) -> domain.BankDetails:
    """Convert SQLAlchemy BankDetails model to domain BankDetails entity."""
    return domain.BankDetails(
        id=orm_details.id,
        user_id=orm_details.user_id,
        account_name=orm_details.account_name,
        account_number=orm_details.account_number,
        sort_code=orm_details.sort_code,
        created_at=orm_details.created_at,
        updated_at=orm_details.updated_at,
    )
