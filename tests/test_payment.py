"""Tests for payment service."""

import pytest
from datetime import date, datetime
from decimal import Decimal

from packflow.domain.entities import PaymentStatus, StatementOfWork
from packflow.domain.errors import NotFoundError, ValidationError
from packflow.domain.payment import parse_status, payment_request_message

NOW = datetime(2024, 1, 15, 12, 30)


def test_create_payment(payment_service):
    """Test creating a pending payment request."""
    payment_id = payment_service.create_payment(
        user_id="alice",
        client_name="  Acme Ltd ",
        total=Decimal("450.00"),
        project_name="Kitchen refit",
        work_period_start=date(2024, 1, 1),
        work_period_end=date(2024, 1, 12),
    )

    payment = payment_service.get_payment("alice", payment_id)
    assert payment.client_name == "Acme Ltd"
    assert payment.total == Decimal("450.00")
    assert payment.status == PaymentStatus.PENDING
    assert payment.created_at == NOW
    assert payment.accepted_at is None
    assert payment.work_period_start == date(2024, 1, 1)


def test_create_payment_requires_client_and_total(payment_service):
    """Test that client name and a non-zero total are required."""
    with pytest.raises(ValidationError, match="Client name and total are required"):
        payment_service.create_payment(user_id="alice", client_name="", total="100")

    with pytest.raises(ValidationError, match="Client name and total are required"):
        payment_service.create_payment(user_id="alice", client_name="Acme", total="0")

    with pytest.raises(ValidationError, match="Client name and total are required"):
        payment_service.create_payment(user_id="alice", client_name="Acme", total="abc")


def test_create_payment_rejects_negative_total(payment_service):
    """Test that negative totals are rejected."""
    with pytest.raises(ValidationError, match="must not be negative"):
        payment_service.create_payment(user_id="alice", client_name="Acme", total="-5")


def test_create_payment_rejects_inverted_work_period(payment_service):
    """Test that the work period must not end before it starts."""
    with pytest.raises(ValidationError, match="before its start"):
        payment_service.create_payment(
            user_id="alice",
            client_name="Acme",
            total="10",
            work_period_start=date(2024, 2, 1),
            work_period_end=date(2024, 1, 1),
        )


def test_create_from_sow(payment_service):
    """Test that a statement of work becomes hours x rate plus fees."""
    sow = StatementOfWork(
        client_name="Jane Smith",
        project_name="Garden wall",
        client_phone="07123456789",
        hours_worked="12.5",
        rate="40",
        additional_fees="25",
    )

    payment_id = payment_service.create_from_sow("alice", sow)

    payment = payment_service.get_payment("alice", payment_id)
    assert payment.subtotal == Decimal("500")
    assert payment.total == Decimal("525")
    assert payment.hours_worked == Decimal("12.5")
    assert payment.rate == Decimal("40")
    assert payment.additional_fees == Decimal("25")
    assert payment.client_phone == "07123456789"


def test_create_from_sow_with_no_billable_amount(payment_service):
    """Test that a statement of work with nothing to bill is rejected."""
    sow = StatementOfWork(client_name="Jane Smith", hours_worked="lots", rate="40")

    with pytest.raises(ValidationError):
        payment_service.create_from_sow("alice", sow)


def test_get_payment_not_found(payment_service):
    """Test getting a payment that does not exist."""
    with pytest.raises(NotFoundError, match="Payment 999 not found"):
        payment_service.get_payment("alice", 999)


def test_payments_are_scoped_to_user(payment_service, sample_payment):
    """Test that another user cannot see or change a payment."""
    with pytest.raises(NotFoundError):
        payment_service.get_payment("bob", sample_payment.id)

    with pytest.raises(NotFoundError):
        payment_service.update_status("bob", sample_payment.id, "accepted")

    with pytest.raises(NotFoundError):
        payment_service.delete_payment("bob", sample_payment.id)

    assert payment_service.list_payments("bob") == []
    assert payment_service.get_payment("alice", sample_payment.id).status == PaymentStatus.PENDING


def test_list_payments_by_status(payment_service, sample_payment):
    """Test listing payments filtered by status."""
    other_id = payment_service.create_payment(user_id="alice", client_name="Globex", total="90")
    payment_service.update_status("alice", other_id, "paid")

    assert len(payment_service.list_payments("alice")) == 2
    paid = payment_service.list_payments("alice", status="paid")
    assert [p.id for p in paid] == [other_id]
    assert payment_service.list_payments("alice", status=PaymentStatus.REJECTED) == []


def test_list_payments_newest_first(payment_service):
    """Test that payments with equal timestamps are listed newest ID first."""
    first = payment_service.create_payment(user_id="alice", client_name="A", total="1")
    second = payment_service.create_payment(user_id="alice", client_name="B", total="2")

    assert [p.id for p in payment_service.list_payments("alice")] == [second, first]


def test_accepting_stamps_accepted_at(payment_service, sample_payment):
    """Test that accepting a payment records when it was accepted."""
    payment = payment_service.update_status("alice", sample_payment.id, "Accepted")

    assert payment.status == PaymentStatus.ACCEPTED
    assert payment.accepted_at == NOW
    assert payment.updated_at == NOW
    assert payment.effective_at == NOW


def test_rejecting_does_not_stamp_accepted_at(payment_service, sample_payment):
    """Test that only acceptance sets accepted_at."""
    payment = payment_service.update_status("alice", sample_payment.id, PaymentStatus.REJECTED)

    assert payment.status == PaymentStatus.REJECTED
    assert payment.accepted_at is None


def test_update_status_invalid(payment_service, sample_payment):
    """Test that unknown statuses are rejected."""
    with pytest.raises(ValidationError, match="Invalid status 'refunded'"):
        payment_service.update_status("alice", sample_payment.id, "refunded")


def test_delete_payment(payment_service, sample_payment):
    """Test deleting a payment."""
    payment_service.delete_payment("alice", sample_payment.id)

    with pytest.raises(NotFoundError):
        payment_service.get_payment("alice", sample_payment.id)
    with pytest.raises(NotFoundError):
        payment_service.delete_payment("alice", sample_payment.id)


def test_parse_status():
    """Test status parsing."""
    assert parse_status("PAID") == PaymentStatus.PAID
    assert parse_status(PaymentStatus.PENDING) == PaymentStatus.PENDING
    with pytest.raises(ValidationError):
        parse_status("overdue")


def test_payment_request_message(sample_payment):
    """Test the SMS text for a new payment request."""
    assert payment_request_message(sample_payment) == (
        "Hi Acme Ltd, you have a new payment request from PackFlow for $450.00 "
        'for "Kitchen refit". Please review and approve.'
    )
