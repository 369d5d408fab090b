"""Money formatting for display.

Amounts are shown the way the agency's Turkish users read them: two fraction
digits, ``.`` between thousands and ``,`` before the decimals, prefixed with
the currency symbol.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from eventbudget.domain.entities import Currency, Project, REFERENCE_CURRENCY
from eventbudget.domain.financials import to_reference_currency

CURRENCY_SYMBOLS = {
    Currency.EUR: "€",
    Currency.USD: "$",
    Currency.GBP: "£",
    Currency.TRY: "₺",
}

_CENT = Decimal("0.01")


def format_number(amount: Decimal) -> str:
    """Format an amount with Turkish grouping, e.g. ``1.234.567,89``."""
    quantized = Decimal(amount).quantize(_CENT, rounding=ROUND_HALF_UP)
    if quantized == 0:
        quantized = abs(quantized)
    grouped = f"{quantized:,.2f}"
    return grouped.replace(",", "\0").replace(".", ",").replace("\0", ".")


def format_currency(
    project: Optional[Project], amount: Decimal, show_reference: bool = False
) -> str:
    """Format an amount in the project's currency.

    Args:
        project: Project whose currency and exchange rate apply
        amount: Amount in the project currency
        show_reference: Append the reference-currency equivalent in
            parentheses when the project is not already in it

    Returns:
        Display string such as ``€1.234,50 (₺47.528,25)``; ``"0"`` when no
        project is loaded
    """
    if project is None:
        return "0"
    formatted = f"{CURRENCY_SYMBOLS[project.currency]}{format_number(amount)}"
    if show_reference and project.currency != REFERENCE_CURRENCY:
        reference = to_reference_currency(project, amount)
        formatted += f" ({CURRENCY_SYMBOLS[REFERENCE_CURRENCY]}{format_number(reference)})"
    return formatted
