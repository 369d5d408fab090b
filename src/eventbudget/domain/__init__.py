"""Domain layer for eventbudget application."""

from eventbudget.domain import editing, financials
from eventbudget.domain.financials import FinancialSummary, summarize
from eventbudget.domain.formatting import format_currency, format_number

__all__ = [
    "editing",
    "financials",
    "FinancialSummary",
    "summarize",
    "format_currency",
    "format_number",
]
