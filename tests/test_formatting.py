"""Tests for money formatting."""

from decimal import Decimal

import pytest

from eventbudget.domain import editing
from eventbudget.domain.formatting import format_currency, format_number


@pytest.mark.parametrize(
    "amount,expected",
    [
        (Decimal("0"), "0,00"),
        (Decimal("5"), "5,00"),
        (Decimal("1234.5"), "1.234,50"),
        (Decimal("1234567.891"), "1.234.567,89"),
        (Decimal("0.005"), "0,01"),
        (Decimal("-1500"), "-1.500,00"),
        (Decimal("-0.001"), "0,00"),
    ],
)
def test_format_number(amount, expected):
    assert format_number(amount) == expected


def test_format_currency_symbol():
    project = editing.new_project(currency="GBP")
    assert format_currency(project, Decimal("99.9")) == "£99,90"


def test_format_currency_with_reference():
    project = editing.new_project(currency="EUR", exchange_rate="38.50")
    assert format_currency(project, Decimal("1234.50"), show_reference=True) == "€1.234,50 (₺47.528,25)"


def test_reference_omitted_for_try_projects():
    project = editing.new_project(currency="TRY")
    assert format_currency(project, Decimal("1000"), show_reference=True) == "₺1.000,00"


def test_no_project():
    assert format_currency(None, Decimal("10")) == "0"
