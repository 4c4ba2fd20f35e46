"""Utility functions for kakeibo."""

from kakeibo.utils.date_parser import parse_date, month_range
from kakeibo.utils.amount_parser import parse_amount

__all__ = ["parse_date", "month_range", "parse_amount"]
