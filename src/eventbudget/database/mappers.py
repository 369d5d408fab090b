"""Mapper functions between domain projects, persisted records and ORM rows.

This is the load/save boundary. A persisted project record is a plain dict
in the storage shape: snake_case top-level keys, camelCase keys inside the
nested line items, JSON numbers for amounts and ISO-8601 strings for dates.
Records written by older clients used camelCase at the top level too, so
both spellings are read.

Loading never fails on missing data: every absent or null field is replaced
with the default a new project would have, and derived values (item totals)
are recomputed rather than trusted.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Optional

from dateutil import parser as date_parser

from eventbudget.domain.entities import (
    Advance,
    AdvanceStatus,
    BudgetCategories,
    BudgetCategory,
    BudgetItem,
    CategoryVatRate,
    Currency,
    CustomRate,
    CUSTOM_RATE_SENTINEL,
    DEFAULT_CATEGORY_VAT_PERCENTS,
    DEFAULT_CLIENT,
    DEFAULT_CURRENCY,
    DEFAULT_EXCHANGE_RATE,
    DEFAULT_EXPENSE_CATEGORY,
    DEFAULT_SERVICE_FEE_PERCENT,
    Expense,
    FixedRate,
    Payment,
    PaymentType,
    Project,
)
from eventbudget.domain.editing import new_id
from eventbudget.database.models import ProjectRow
from eventbudget.utils.amount_parser import (
    coerce_amount,
    coerce_non_negative_amount,
    coerce_quantity,
)
from eventbudget.utils.date_parser import coerce_date

Record = dict[str, Any]

ROW_FIELDS = (
    "id",
    "name",
    "client",
    "date",
    "currency",
    "exchange_rate",
    "is_international",
    "service_fee_percent",
    "categories",
    "category_vat_rates",
    "payments",
    "advances",
    "expenses",
    "created_at",
    "updated_at",
)


def _camel(key: str) -> str:
    head, *rest = key.split("_")
    return head + "".join(part.capitalize() for part in rest)


def _field(record: Record, key: str, default=None):
    """Read ``key`` in snake_case or camelCase; null counts as absent."""
    for candidate in (key, _camel(key)):
        value = record.get(candidate)
        if value is not None:
            return value
    return default


def _number(value: Decimal):
    """Render a Decimal as a JSON number, keeping whole values as ints."""
    if value == value.to_integral_value():
        return int(value)
    return float(value)


def _positive_or_default(value, default: Decimal) -> Decimal:
    amount = coerce_amount(value)
    return amount if amount > 0 else default


def _timestamp(value) -> Optional[datetime]:
    if value is None or isinstance(value, datetime):
        return value
    try:
        return date_parser.isoparse(str(value))
    except (ValueError, OverflowError):
        return None


def _enum_or_default(enum_cls, value, default):
    try:
        return enum_cls(value)
    except ValueError:
        return default


# Load boundary


def budget_item_from_record(record: Record) -> BudgetItem:
    return BudgetItem(
        id=str(_field(record, "id") or new_id()),
        description=str(_field(record, "description", "")),
        quantity=coerce_quantity(_field(record, "quantity", 0)),
        unit_price=coerce_non_negative_amount(_field(record, "unit_price", 0)),
    )


def categories_from_record(value) -> BudgetCategories:
    if not isinstance(value, dict):
        return BudgetCategories()
    categories = BudgetCategories()
    for category in BudgetCategory:
        items = value.get(category.value) or []
        categories = categories.with_items(
            category, (budget_item_from_record(item) for item in items if isinstance(item, dict))
        )
    return categories


def vat_rates_from_record(value) -> tuple[CategoryVatRate, ...]:
    """Normalize VAT entries to exactly one per category, in category order.

    The first entry for a category wins; entries for unknown categories are
    dropped and missing categories get their default rate.
    """
    found: dict[BudgetCategory, CategoryVatRate] = {}
    for entry in value if isinstance(value, list) else []:
        if not isinstance(entry, dict):
            continue
        try:
            category = BudgetCategory(entry.get("category"))
        except ValueError:
            continue
        if category in found:
            continue
        rate = coerce_amount(_field(entry, "rate", DEFAULT_CATEGORY_VAT_PERCENTS[category]))
        if rate == CUSTOM_RATE_SENTINEL:
            custom = _field(entry, "custom_rate")
            vat_rate = CustomRate(None if custom is None else coerce_amount(custom))
        else:
            vat_rate = FixedRate(rate)
        found[category] = CategoryVatRate(category=category, rate=vat_rate)

    return tuple(
        found.get(category)
        or CategoryVatRate(category=category, rate=FixedRate(DEFAULT_CATEGORY_VAT_PERCENTS[category]))
        for category in BudgetCategory
    )


def payment_from_record(record: Record, today: date) -> Payment:
    return Payment(
        id=str(_field(record, "id") or new_id()),
        date=coerce_date(_field(record, "date"), today),
        description=str(_field(record, "description", "")),
        amount=coerce_amount(_field(record, "amount", 0)),
        type=_enum_or_default(PaymentType, _field(record, "type"), PaymentType.INCOMING),
    )


def advance_from_record(record: Record, today: date) -> Advance:
    return Advance(
        id=str(_field(record, "id") or new_id()),
        date=coerce_date(_field(record, "date"), today),
        description=str(_field(record, "description", "")),
        amount=coerce_amount(_field(record, "amount", 0)),
        status=_enum_or_default(AdvanceStatus, _field(record, "status"), AdvanceStatus.PENDING),
        supplier=str(_field(record, "supplier", "")),
    )


def expense_from_record(record: Record, today: date) -> Expense:
    return Expense(
        id=str(_field(record, "id") or new_id()),
        date=coerce_date(_field(record, "date"), today),
        description=str(_field(record, "description", "")),
        amount=coerce_amount(_field(record, "amount", 0)),
        category=str(_field(record, "category") or DEFAULT_EXPENSE_CATEGORY),
    )


def _entries(value) -> list[Record]:
    if not isinstance(value, list):
        return []
    return [entry for entry in value if isinstance(entry, dict)]


def project_from_record(record: Record) -> Project:
    """Convert a persisted project record to a domain Project.

    Every absent field is defaulted, so the financial model never observes
    a malformed project.
    """
    today = date.today()
    service_fee = _field(record, "service_fee_percent")
    return Project(
        id=str(_field(record, "id") or new_id()),
        name=str(_field(record, "name", "")),
        client=str(_field(record, "client") or DEFAULT_CLIENT),
        date=coerce_date(_field(record, "date"), today),
        currency=_enum_or_default(Currency, _field(record, "currency"), DEFAULT_CURRENCY),
        exchange_rate=_positive_or_default(_field(record, "exchange_rate"), DEFAULT_EXCHANGE_RATE),
        is_international=bool(_field(record, "is_international", False)),
        service_fee_percent=(
            DEFAULT_SERVICE_FEE_PERCENT if service_fee is None else coerce_amount(service_fee)
        ),
        categories=categories_from_record(_field(record, "categories")),
        category_vat_rates=vat_rates_from_record(_field(record, "category_vat_rates")),
        payments=tuple(payment_from_record(r, today) for r in _entries(_field(record, "payments"))),
        advances=tuple(advance_from_record(r, today) for r in _entries(_field(record, "advances"))),
        expenses=tuple(expense_from_record(r, today) for r in _entries(_field(record, "expenses"))),
        created_at=_timestamp(_field(record, "created_at")),
        updated_at=_timestamp(_field(record, "updated_at")),
    )


# Save boundary


def budget_item_to_record(item: BudgetItem) -> Record:
    return {
        "id": item.id,
        "description": item.description,
        "quantity": item.quantity,
        "unitPrice": _number(item.unit_price),
        "total": _number(item.total),
    }


def vat_rate_to_record(entry: CategoryVatRate) -> Record:
    if isinstance(entry.rate, CustomRate):
        record: Record = {"category": entry.category.value, "rate": CUSTOM_RATE_SENTINEL}
        if entry.rate.percent is not None:
            record["customRate"] = _number(entry.rate.percent)
        return record
    return {"category": entry.category.value, "rate": _number(entry.rate.percent)}


def payment_to_record(payment: Payment) -> Record:
    return {
        "id": payment.id,
        "date": payment.date.isoformat(),
        "description": payment.description,
        "amount": _number(payment.amount),
        "type": payment.type.value,
    }


def advance_to_record(advance: Advance) -> Record:
    return {
        "id": advance.id,
        "date": advance.date.isoformat(),
        "description": advance.description,
        "amount": _number(advance.amount),
        "status": advance.status.value,
        "supplier": advance.supplier,
    }


def expense_to_record(expense: Expense) -> Record:
    return {
        "id": expense.id,
        "date": expense.date.isoformat(),
        "description": expense.description,
        "amount": _number(expense.amount),
        "category": expense.category,
    }


def project_to_record(project: Project) -> Record:
    """Convert a domain Project to its persisted record (JSON-safe)."""
    return {
        "id": project.id,
        "name": project.name,
        "client": project.client,
        "date": project.date.isoformat(),
        "currency": project.currency.value,
        "exchange_rate": _number(project.exchange_rate),
        "is_international": project.is_international,
        "service_fee_percent": _number(project.service_fee_percent),
        "categories": {
            category.value: [budget_item_to_record(item) for item in project.categories.items(category)]
            for category in BudgetCategory
        },
        "category_vat_rates": [vat_rate_to_record(entry) for entry in project.category_vat_rates],
        "payments": [payment_to_record(p) for p in project.payments],
        "advances": [advance_to_record(a) for a in project.advances],
        "expenses": [expense_to_record(e) for e in project.expenses],
        "created_at": project.created_at.isoformat() if project.created_at else None,
        "updated_at": project.updated_at.isoformat() if project.updated_at else None,
    }


# ORM rows


def row_to_record(row: ProjectRow) -> Record:
    """Convert a SQLAlchemy ProjectRow to a persisted record."""
    return {field: getattr(row, field) for field in ROW_FIELDS}


def row_to_domain(row: ProjectRow) -> Project:
    """Convert a SQLAlchemy ProjectRow to a domain Project."""
    return project_from_record(row_to_record(row))


def apply_project_to_row(row: ProjectRow, project: Project) -> None:
    """Copy a project's fields onto a row; timestamps are left to the store."""
    record = project_to_record(project)
    row.name = project.name
    row.client = project.client
    row.date = project.date
    row.currency = project.currency.value
    row.exchange_rate = str(project.exchange_rate)
    row.is_international = project.is_international
    row.service_fee_percent = str(project.service_fee_percent)
    for field in ("categories", "category_vat_rates", "payments", "advances", "expenses"):
        setattr(row, field, record[field])
