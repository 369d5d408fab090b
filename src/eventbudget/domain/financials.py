"""Financial model: derived values for a project snapshot.

Every function here is pure. It reads one immutable ``Project`` and returns a
number; nothing is cached or mutated, so the functions can be called freely
from any thread. A missing project (``None``) yields the identity value of
the operation (0 for sums, 20 for the default VAT rate) instead of raising.

Budget categories are pass-through client costs. The service fee is the
agency's only revenue line, which is why ``net_profit`` only looks at the fee
and the agency's own expenses.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Optional, Union

from eventbudget.domain.entities import (
    Advance,
    AdvanceStatus,
    BudgetCategory,
    CategoryVatRate,
    CustomRate,
    DEFAULT_VAT_PERCENT,
    PaymentType,
    Project,
    REFERENCE_CURRENCY,
)

ZERO = Decimal("0")
HUNDRED = Decimal("100")

# The service fee is always taxed at this rate, international or not.
SERVICE_FEE_VAT_PERCENT = Decimal("20")

CategoryKey = Union[str, BudgetCategory]


def _sum(values: Iterable[Decimal]) -> Decimal:
    return sum(values, ZERO)


def find_vat_entry(
    project: Project, category: CategoryKey
) -> Optional[CategoryVatRate]:
    """Return the first VAT entry configured for ``category``, if any."""
    category = BudgetCategory.parse(category)
    for entry in project.category_vat_rates:
        if entry.category == category:
            return entry
    return None


def get_vat_rate(project: Optional[Project], category: CategoryKey) -> Decimal:
    """Effective VAT percentage for a budget category.

    International projects are VAT exempt on every category. Otherwise the
    configured entry decides; a missing entry means 20%, an unset custom rate
    means 0%.
    """
    if project is None:
        return DEFAULT_VAT_PERCENT
    if project.is_international:
        return ZERO
    entry = find_vat_entry(project, category)
    if entry is None:
        return DEFAULT_VAT_PERCENT
    if isinstance(entry.rate, CustomRate):
        return entry.rate.percent if entry.rate.percent is not None else ZERO
    return entry.rate.percent


def get_category_total(project: Optional[Project], category: CategoryKey) -> Decimal:
    """Sum of item totals in one category."""
    if project is None:
        return ZERO
    return _sum(item.total for item in project.categories.items(category))


def get_subtotal(project: Optional[Project]) -> Decimal:
    """Sum of all five category totals, added in category order."""
    return _sum(get_category_total(project, category) for category in BudgetCategory)


def get_service_fee(project: Optional[Project]) -> Decimal:
    """Agency fee: the subtotal times the project's service fee percentage."""
    if project is None:
        return ZERO
    return get_subtotal(project) * project.service_fee_percent / HUNDRED


def get_total_before_vat(project: Optional[Project]) -> Decimal:
    return get_subtotal(project) + get_service_fee(project)


def get_category_vat(project: Optional[Project], category: CategoryKey) -> Decimal:
    """VAT charged on one category's total."""
    return get_category_total(project, category) * get_vat_rate(project, category) / HUNDRED


def get_service_fee_vat(project: Optional[Project]) -> Decimal:
    """VAT on the service fee, never exempted."""
    return get_service_fee(project) * SERVICE_FEE_VAT_PERCENT / HUNDRED


def get_total_vat(project: Optional[Project]) -> Decimal:
    """Category VAT for all five categories plus the service fee VAT."""
    if project is None:
        return ZERO
    category_vat = _sum(get_category_vat(project, category) for category in BudgetCategory)
    return category_vat + get_service_fee_vat(project)


def get_grand_total(project: Optional[Project]) -> Decimal:
    return get_total_before_vat(project) + get_total_vat(project)


def to_reference_currency(project: Optional[Project], amount: Decimal) -> Decimal:
    """Convert an amount in the project currency to the reference currency (TRY).

    The project's single static exchange rate is used; amounts already in the
    reference currency are returned unchanged.
    """
    if project is None or project.currency == REFERENCE_CURRENCY:
        return amount
    return amount * project.exchange_rate


def project_budget_total(project: Optional[Project]) -> Decimal:
    """Sum of every budget item, as shown on the project list."""
    if project is None:
        return ZERO
    return _sum(item.total for item in project.categories.all_items())


# Analysis aggregates


def total_incoming_payments(project: Optional[Project]) -> Decimal:
    if project is None:
        return ZERO
    return _sum(p.amount for p in project.payments if p.type == PaymentType.INCOMING)


def total_outgoing_payments(project: Optional[Project]) -> Decimal:
    if project is None:
        return ZERO
    return _sum(p.amount for p in project.payments if p.type == PaymentType.OUTGOING)


def total_advances(project: Optional[Project]) -> Decimal:
    """Sum of all advances regardless of status."""
    if project is None:
        return ZERO
    return _sum(a.amount for a in project.advances)


def pending_advance_items(project: Optional[Project]) -> tuple[Advance, ...]:
    """Advances still open, in insertion order."""
    if project is None:
        return ()
    return tuple(a for a in project.advances if a.status == AdvanceStatus.PENDING)


def pending_advances(project: Optional[Project]) -> Decimal:
    return _sum(a.amount for a in pending_advance_items(project))


def total_expenses(project: Optional[Project]) -> Decimal:
    if project is None:
        return ZERO
    return _sum(e.amount for e in project.expenses)


def net_profit(project: Optional[Project]) -> Decimal:
    """Service fee minus the agency's expenses."""
    return get_service_fee(project) - total_expenses(project)


def cash_flow(project: Optional[Project]) -> Decimal:
    """Incoming payments minus outgoing payments minus all advances."""
    return (
        total_incoming_payments(project)
        - total_outgoing_payments(project)
        - total_advances(project)
    )


@dataclass(frozen=True)
class CategoryFigures:
    """Per-category line of a financial summary."""

    category: BudgetCategory
    total: Decimal
    vat_rate: Decimal
    vat: Decimal


@dataclass(frozen=True)
class FinancialSummary:
    """Every derived figure for one project snapshot."""

    categories: tuple[CategoryFigures, ...]
    subtotal: Decimal
    service_fee: Decimal
    total_before_vat: Decimal
    service_fee_vat: Decimal
    total_vat: Decimal
    grand_total: Decimal
    grand_total_reference: Decimal
    total_incoming_payments: Decimal
    total_outgoing_payments: Decimal
    total_advances: Decimal
    pending_advances: Decimal
    total_expenses: Decimal
    net_profit: Decimal
    cash_flow: Decimal

    def category(self, category: CategoryKey) -> CategoryFigures:
        """Return the figures for one category."""
        category = BudgetCategory.parse(category)
        for figures in self.categories:
            if figures.category == category:
                return figures
        raise KeyError(category)


def summarize(project: Optional[Project]) -> FinancialSummary:
    """Compute every aggregate for ``project`` in one pass."""
    grand_total = get_grand_total(project)
    return FinancialSummary(
        categories=tuple(
            CategoryFigures(
                category=category,
                total=get_category_total(project, category),
                vat_rate=get_vat_rate(project, category),
                vat=get_category_vat(project, category),
            )
            for category in BudgetCategory
        ),
        subtotal=get_subtotal(project),
        service_fee=get_service_fee(project),
        total_before_vat=get_total_before_vat(project),
        service_fee_vat=get_service_fee_vat(project),
        total_vat=get_total_vat(project),
        grand_total=grand_total,
        grand_total_reference=to_reference_currency(project, grand_total),
        total_incoming_payments=total_incoming_payments(project),
        total_outgoing_payments=total_outgoing_payments(project),
        total_advances=total_advances(project),
        pending_advances=pending_advances(project),
        total_expenses=total_expenses(project),
        net_profit=net_profit(project),
        cash_flow=cash_flow(project),
    )
