"""Utility functions for eventbudget."""

from eventbudget.utils.date_parser import parse_date, coerce_date
from eventbudget.utils.amount_parser import (
    parse_amount,
    coerce_amount,
    coerce_decimal,
    coerce_non_negative_amount,
    coerce_quantity,
)

__all__ = [
    "parse_date",
    "coerce_date",
    "parse_amount",
    "coerce_amount",
    "coerce_decimal",
    "coerce_non_negative_amount",
    "coerce_quantity",
]
