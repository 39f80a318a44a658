"""Utility functions for packflow."""

from packflow.utils.date_parser import parse_date, parse_timestamp, resolve_now
from packflow.utils.amount_parser import parse_amount, coerce_amount

__all__ = ["parse_date", "parse_timestamp", "resolve_now", "parse_amount", "coerce_amount"]
