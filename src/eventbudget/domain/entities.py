"""Domain model entities for eventbudget.

These are pure, immutable data classes representing a client project and its
line items, independent of how the project is persisted. Every edit produces
a new value; nothing here is mutated in place.
"""

from dataclasses import dataclass, field, replace
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Iterator, Optional, Union

from eventbudget.domain.errors import ValidationError, unknown_category


class Currency(str, Enum):
    """Currencies a project can be budgeted in."""

    EUR = "EUR"
    USD = "USD"
    GBP = "GBP"
    TRY = "TRY"


REFERENCE_CURRENCY = Currency.TRY


class BudgetCategory(str, Enum):
    """The fixed budget categories every project carries, in display order."""

    REGISTRATION = "registration"
    ACCOMMODATION = "accommodation"
    TRANSFER = "transfer"
    SPONSORSHIP = "sponsorship"
    OTHER = "other"

    @classmethod
    def parse(cls, value: Union[str, "BudgetCategory"]) -> "BudgetCategory":
        """Resolve a category key (case-insensitive) to a BudgetCategory.

        Raises:
            ValidationError: If the key is not one of the five categories
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValidationError(unknown_category(str(value))) from None


class PaymentType(str, Enum):
    """Direction of a payment."""

    INCOMING = "incoming"
    OUTGOING = "outgoing"


class AdvanceStatus(str, Enum):
    """Lifecycle of a supplier advance."""

    PENDING = "pending"
    CLOSED = "closed"


# Canonical VAT percentages offered for a category; anything else is a custom rate.
VAT_RATE_OPTIONS = (0, 1, 8, 10, 12, 18, 20)

# Storage encoding of a custom rate in the persisted record.
CUSTOM_RATE_SENTINEL = -1


@dataclass(frozen=True)
class FixedRate:
    """A category VAT rate taken verbatim."""

    percent: Decimal


@dataclass(frozen=True)
class CustomRate:
    """A category VAT rate entered by hand; unset means 0."""

    percent: Optional[Decimal] = None


VatRate = Union[FixedRate, CustomRate]


@dataclass(frozen=True)
class CategoryVatRate:
    """VAT configuration for one budget category."""

    category: BudgetCategory
    rate: VatRate


@dataclass(frozen=True)
class BudgetItem:
    """A single budget line. ``total`` is always quantity * unit_price."""

    id: str
    description: str
    quantity: int
    unit_price: Decimal
    total: Decimal = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "total", Decimal(self.quantity) * self.unit_price)


@dataclass(frozen=True)
class BudgetCategories:
    """Budget items grouped under the five fixed categories."""

    registration: tuple[BudgetItem, ...] = ()
    accommodation: tuple[BudgetItem, ...] = ()
    transfer: tuple[BudgetItem, ...] = ()
    sponsorship: tuple[BudgetItem, ...] = ()
    other: tuple[BudgetItem, ...] = ()

    def items(self, category: Union[str, BudgetCategory]) -> tuple[BudgetItem, ...]:
        """Return the items of one category."""
        return getattr(self, BudgetCategory.parse(category).value)

    def with_items(
        self, category: Union[str, BudgetCategory], items
    ) -> "BudgetCategories":
        """Return a copy with one category's items replaced."""
        return replace(self, **{BudgetCategory.parse(category).value: tuple(items)})

    def all_items(self) -> Iterator[BudgetItem]:
        """Iterate over every item in category order."""
        for category in BudgetCategory:
            yield from self.items(category)


@dataclass(frozen=True)
class Payment:
    """Money received from the client or paid out."""

    id: str
    date: date
    description: str
    amount: Decimal
    type: PaymentType


@dataclass(frozen=True)
class Advance:
    """Prepayment to a supplier."""

    id: str
    date: date
    description: str
    amount: Decimal
    status: AdvanceStatus
    supplier: str


@dataclass(frozen=True)
class Expense:
    """Cost borne by the agency.

    ``category`` is free text, conventionally one of the budget category keys.
    """

    id: str
    date: date
    description: str
    amount: Decimal
    category: str


@dataclass(frozen=True)
class Project:
    """Project domain entity, the root aggregate."""

    id: str
    name: str
    client: str
    date: date
    currency: Currency
    exchange_rate: Decimal
    is_international: bool
    service_fee_percent: Decimal
    categories: BudgetCategories
    category_vat_rates: tuple[CategoryVatRate, ...]
    payments: tuple[Payment, ...] = ()
    advances: tuple[Advance, ...] = ()
    expenses: tuple[Expense, ...] = ()
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


DEFAULT_CLIENT = "Novartis"
DEFAULT_CURRENCY = Currency.EUR
DEFAULT_EXCHANGE_RATE = Decimal("38.50")
DEFAULT_SERVICE_FEE_PERCENT = Decimal("10")
DEFAULT_VAT_PERCENT = Decimal("20")
DEFAULT_EXPENSE_CATEGORY = BudgetCategory.OTHER.value

DEFAULT_CATEGORY_VAT_PERCENTS = {
    BudgetCategory.REGISTRATION: Decimal("20"),
    BudgetCategory.ACCOMMODATION: Decimal("12"),
    BudgetCategory.TRANSFER: Decimal("20"),
    BudgetCategory.SPONSORSHIP: Decimal("20"),
    BudgetCategory.OTHER: Decimal("20"),
}


def default_category_vat_rates() -> tuple[CategoryVatRate, ...]:
    """Return the VAT configuration a new project starts with."""
    return tuple(
        CategoryVatRate(category=category, rate=FixedRate(percent))
        for category, percent in DEFAULT_CATEGORY_VAT_PERCENTS.items()
    )
