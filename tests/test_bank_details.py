"""Tests for bank details service."""

import pytest
from datetime import datetime

from packflow.domain.bank_details import (
    clean_account_number,
    clean_sort_code,
    format_sort_code,
)
from packflow.domain.errors import ValidationError


def test_get_without_details(bank_details_service):
    """Test that a user with no saved details gets None."""
    assert bank_details_service.get("alice") is None


def test_upsert_creates_details(bank_details_service):
    """Test saving bank details for the first time."""
    details = bank_details_service.upsert(
        "alice", account_name=" J Smith ", account_number="1234 5678", sort_code="12-34-56"
    )

    assert details.account_name == "J Smith"
    assert details.account_number == "12345678"
    assert details.sort_code == "123456"
    assert details.created_at == datetime(2024, 1, 15, 12, 30)
    assert details.updated_at is None
    assert bank_details_service.get("alice") == details


def test_upsert_replaces_existing_details(bank_details_service):
    """Test that saving again updates the same record."""
    first = bank_details_service.upsert("alice", "J Smith", "12345678", "123456")
    second = bank_details_service.upsert("alice", "Jane Smith", "87654321", "65 43 21")

    assert second.id == first.id
    assert second.account_name == "Jane Smith"
    assert second.account_number == "87654321"
    assert second.sort_code == "654321"
    assert second.updated_at is not None


def test_details_are_per_user(bank_details_service):
    """Test that each user has their own bank details."""
    bank_details_service.upsert("alice", "Alice", "12345678", "123456")

    assert bank_details_service.get("bob") is None


@pytest.mark.parametrize(
    "account_name,account_number,sort_code,message",
    [
        ("", "12345678", "123456", "are required"),
        ("J Smith", "", "123456", "are required"),
        ("J Smith", "12345678", "", "are required"),
        ("   ", "12345678", "123456", "between 1 and 100 characters"),
        ("x" * 101, "12345678", "123456", "between 1 and 100 characters"),
        ("J Smith", "1234567", "123456", "exactly 8 digits"),
        ("J Smith", "1234567a", "123456", "exactly 8 digits"),
        ("J Smith", "12345678", "12-34-5", "exactly 6 digits"),
    ],
)
def test_upsert_validation(bank_details_service, account_name, account_number, sort_code, message):
    """Test validation of bank detail fields."""
    with pytest.raises(ValidationError, match=message):
        bank_details_service.upsert("alice", account_name, account_number, sort_code)

    assert bank_details_service.get("alice") is None


def test_clean_helpers():
    """Test account number and sort code normalization."""
    assert clean_account_number(" 12 34 56 78 ") == "12345678"
    assert clean_sort_code("12-34-56") == "123456"
    assert format_sort_code("123456") == "12-34-56"
