"""Snapshot editing functions.

Each function takes a ``Project`` and returns a new ``Project``; the input
snapshot is never touched. Changing one budget item builds a new item, a new
tuple for its category, a new ``BudgetCategories`` and finally a new project,
so callers can detect changes by identity.

User input is coerced here, at the edit boundary: non-numeric quantities and
amounts become 0 before they reach the financial model.
"""

import uuid
from dataclasses import replace
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Optional, Union

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
    VAT_RATE_OPTIONS,
    VatRate,
    default_category_vat_rates,
)
from eventbudget.domain.errors import (
    NotFoundError,
    ValidationError,
    budget_item_not_found,
    entry_not_found,
    percent_out_of_range,
)
from eventbudget.utils.amount_parser import (
    coerce_amount,
    coerce_decimal,
    coerce_non_negative_amount,
    coerce_quantity,
    parse_amount,
)
from eventbudget.utils.date_parser import parse_date

PROJECT_FIELDS = frozenset(
    {
        "name",
        "client",
        "date",
        "currency",
        "exchange_rate",
        "is_international",
        "service_fee_percent",
    }
)
BUDGET_ITEM_FIELDS = frozenset({"description", "quantity", "unit_price"})
PAYMENT_FIELDS = frozenset({"date", "description", "amount", "type"})
ADVANCE_FIELDS = frozenset({"date", "description", "amount", "status", "supplier"})
EXPENSE_FIELDS = frozenset({"date", "description", "amount", "category"})


def new_id() -> str:
    """Generate an opaque unique id for a project or line item."""
    return str(uuid.uuid4())


def _check_fields(changes: dict, allowed: frozenset, kind: str) -> None:
    unknown = sorted(set(changes) - allowed)
    if unknown:
        raise ValidationError(f"Unknown {kind} field(s): {', '.join(unknown)}")


def _check_percent(field: str, value: Decimal) -> Decimal:
    if value < 0 or value > 100:
        raise ValidationError(percent_out_of_range(field, value))
    return value


def _to_date(value: Union[str, date, None]) -> date:
    if value is None:
        return date.today()
    if isinstance(value, date):
        return value
    try:
        return parse_date(value)
    except ValueError as e:
        raise ValidationError(str(e)) from e


def _to_enum(enum_cls, value, field: str):
    try:
        return enum_cls(value.lower() if isinstance(value, str) else value)
    except ValueError:
        choices = ", ".join(member.value for member in enum_cls)
        raise ValidationError(f"Invalid {field} '{value}'. Expected one of: {choices}") from None


def _to_currency(value) -> Currency:
    try:
        return Currency(value.upper() if isinstance(value, str) else value)
    except ValueError:
        choices = ", ".join(member.value for member in Currency)
        raise ValidationError(f"Invalid currency '{value}'. Expected one of: {choices}") from None


def _normalize_project_field(key: str, value):
    if key in ("name", "client"):
        return "" if value is None else str(value)
    if key == "date":
        return _to_date(value)
    if key == "currency":
        return _to_currency(value)
    if key == "exchange_rate":
        rate = coerce_amount(value)
        if rate <= 0:
            raise ValidationError(f"Exchange rate must be positive, got {rate}")
        return rate
    if key == "is_international":
        return bool(value)
    if key == "service_fee_percent":
        return _check_percent("Service fee", coerce_amount(value))
    raise ValidationError(f"Unknown project field: {key}")


def _normalize_entry_field(key: str, value):
    if key in ("description", "supplier", "category"):
        return "" if value is None else str(value)
    if key == "date":
        return _to_date(value)
    if key == "amount":
        return coerce_amount(value)
    if key == "type":
        return _to_enum(PaymentType, value, "payment type")
    if key == "status":
        return _to_enum(AdvanceStatus, value, "advance status")
    raise ValidationError(f"Unknown field: {key}")


def new_project(**fields) -> Project:
    """Create a project with the full default shape.

    All five categories start empty, VAT rates start at their per-category
    defaults and the payment, advance and expense lists are empty.

    Args:
        **fields: Optional descriptive fields to set (see ``update_project``)

    Returns:
        New project with a generated id
    """
    project = Project(
        id=new_id(),
        name="",
        client=DEFAULT_CLIENT,
        date=date.today(),
        currency=DEFAULT_CURRENCY,
        exchange_rate=DEFAULT_EXCHANGE_RATE,
        is_international=False,
        service_fee_percent=DEFAULT_SERVICE_FEE_PERCENT,
        categories=BudgetCategories(),
        category_vat_rates=default_category_vat_rates(),
    )
    if fields:
        project = update_project(project, **fields)
    return project


def update_project(project: Project, **changes) -> Project:
    """Replace descriptive fields of a project.

    Raises:
        ValidationError: On unknown fields, an unknown currency, a
            non-positive exchange rate or a service fee outside 0-100
    """
    _check_fields(changes, PROJECT_FIELDS, "project")
    normalized = {key: _normalize_project_field(key, value) for key, value in changes.items()}
    return replace(project, **normalized)


# Budget items


def add_budget_item(
    project: Project,
    category: Union[str, BudgetCategory],
    description: str = "",
    quantity=1,
    unit_price=0,
) -> Project:
    """Append a budget item to a category."""
    item = BudgetItem(
        id=new_id(),
        description=description or "",
        quantity=coerce_quantity(quantity),
        unit_price=coerce_non_negative_amount(unit_price),
    )
    items = project.categories.items(category) + (item,)
    return replace(project, categories=project.categories.with_items(category, items))


def update_budget_item(
    project: Project, category: Union[str, BudgetCategory], item_id: str, **changes
) -> Project:
    """Update a budget item; its total is recomputed from quantity and unit price.

    Raises:
        NotFoundError: If the category holds no item with ``item_id``
    """
    _check_fields(changes, BUDGET_ITEM_FIELDS, "budget item")
    category = BudgetCategory.parse(category)
    normalized = {}
    for key, value in changes.items():
        if key == "quantity":
            normalized[key] = coerce_quantity(value)
        elif key == "unit_price":
            normalized[key] = coerce_non_negative_amount(value)
        else:
            normalized[key] = "" if value is None else str(value)

    items = project.categories.items(category)
    if not any(item.id == item_id for item in items):
        raise NotFoundError(budget_item_not_found(category.value, item_id))
    updated = tuple(replace(item, **normalized) if item.id == item_id else item for item in items)
    return replace(project, categories=project.categories.with_items(category, updated))


def delete_budget_item(
    project: Project, category: Union[str, BudgetCategory], item_id: str
) -> Project:
    """Remove a budget item by id."""
    category = BudgetCategory.parse(category)
    items = project.categories.items(category)
    remaining = tuple(item for item in items if item.id != item_id)
    if len(remaining) == len(items):
        raise NotFoundError(budget_item_not_found(category.value, item_id))
    return replace(project, categories=project.categories.with_items(category, remaining))


# VAT


def vat_rate_from_input(rate, custom_rate=None) -> VatRate:
    """Build a VAT rate from a selected option.

    ``rate`` is one of the canonical percentages, or -1 / "custom" to use
    ``custom_rate`` (unset means 0 at computation time).

    Raises:
        ValidationError: If the rate is not a number or not an offered
            option, or the custom rate is not a number in 0-100
    """
    if isinstance(rate, (FixedRate, CustomRate)):
        return rate
    options = ", ".join(str(option) for option in VAT_RATE_OPTIONS)
    message = f"VAT rate must be one of {options} or custom, got {rate}"
    if isinstance(rate, str) and rate.strip().lower() == "custom":
        rate = CUSTOM_RATE_SENTINEL
    percent = _parse_percent(rate, message)
    if percent == CUSTOM_RATE_SENTINEL:
        if custom_rate is None:
            return CustomRate()
        custom = _parse_percent(custom_rate, f"Custom VAT rate must be a number, got {custom_rate}")
        return CustomRate(_check_percent("Custom VAT rate", custom))
    if percent not in VAT_RATE_OPTIONS:
        raise ValidationError(message)
    return FixedRate(percent)


def _parse_percent(value, message: str) -> Decimal:
    if value is None or isinstance(value, bool):
        raise ValidationError(message)
    try:
        percent = parse_amount(value) if isinstance(value, str) else coerce_decimal(value)
    except (ValueError, TypeError, InvalidOperation) as e:
        raise ValidationError(message) from e
    if not percent.is_finite():
        raise ValidationError(message)
    return percent


def set_vat_rate(
    project: Project, category: Union[str, BudgetCategory], rate, custom_rate=None
) -> Project:
    """Set the VAT rate of one category.

    The category's entry is replaced in place; a missing entry is appended.
    """
    category = BudgetCategory.parse(category)
    entry = CategoryVatRate(category=category, rate=vat_rate_from_input(rate, custom_rate))
    rates = project.category_vat_rates
    if any(existing.category == category for existing in rates):
        rates = tuple(entry if existing.category == category else existing for existing in rates)
    else:
        rates = rates + (entry,)
    return replace(project, category_vat_rates=rates)


# Payments, advances and expenses


def _update_entry(entries: tuple, entry_id: str, kind: str, normalized: dict) -> tuple:
    if not any(entry.id == entry_id for entry in entries):
        raise NotFoundError(entry_not_found(kind, entry_id))
    return tuple(replace(entry, **normalized) if entry.id == entry_id else entry for entry in entries)


def _remove_entry(entries: tuple, entry_id: str, kind: str) -> tuple:
    remaining = tuple(entry for entry in entries if entry.id != entry_id)
    if len(remaining) == len(entries):
        raise NotFoundError(entry_not_found(kind, entry_id))
    return remaining


def add_payment(
    project: Project,
    type,
    date: Optional[Union[str, date]] = None,
    description: str = "",
    amount=0,
) -> Project:
    """Append a payment of the given type (incoming or outgoing)."""
    payment = Payment(
        id=new_id(),
        date=_to_date(date),
        description=description or "",
        amount=coerce_amount(amount),
        type=_to_enum(PaymentType, type, "payment type"),
    )
    return replace(project, payments=project.payments + (payment,))


def update_payment(project: Project, payment_id: str, **changes) -> Project:
    _check_fields(changes, PAYMENT_FIELDS, "payment")
    normalized = {key: _normalize_entry_field(key, value) for key, value in changes.items()}
    return replace(
        project, payments=_update_entry(project.payments, payment_id, "payment", normalized)
    )


def delete_payment(project: Project, payment_id: str) -> Project:
    return replace(project, payments=_remove_entry(project.payments, payment_id, "payment"))


def add_advance(
    project: Project,
    date: Optional[Union[str, date]] = None,
    description: str = "",
    amount=0,
    supplier: str = "",
) -> Project:
    """Append a pending advance."""
    advance = Advance(
        id=new_id(),
        date=_to_date(date),
        description=description or "",
        amount=coerce_amount(amount),
        status=AdvanceStatus.PENDING,
        supplier=supplier or "",
    )
    return replace(project, advances=project.advances + (advance,))


def update_advance(project: Project, advance_id: str, **changes) -> Project:
    _check_fields(changes, ADVANCE_FIELDS, "advance")
    normalized = {key: _normalize_entry_field(key, value) for key, value in changes.items()}
    return replace(
        project, advances=_update_entry(project.advances, advance_id, "advance", normalized)
    )


def close_advance(project: Project, advance_id: str) -> Project:
    return update_advance(project, advance_id, status=AdvanceStatus.CLOSED)


def reopen_advance(project: Project, advance_id: str) -> Project:
    """Move a closed advance back to pending."""
    return update_advance(project, advance_id, status=AdvanceStatus.PENDING)


def delete_advance(project: Project, advance_id: str) -> Project:
    return replace(project, advances=_remove_entry(project.advances, advance_id, "advance"))


def add_expense(
    project: Project,
    date: Optional[Union[str, date]] = None,
    description: str = "",
    amount=0,
    category: str = DEFAULT_EXPENSE_CATEGORY,
) -> Project:
    """Append an agency expense."""
    expense = Expense(
        id=new_id(),
        date=_to_date(date),
        description=description or "",
        amount=coerce_amount(amount),
        category=category or DEFAULT_EXPENSE_CATEGORY,
    )
    return replace(project, expenses=project.expenses + (expense,))


def update_expense(project: Project, expense_id: str, **changes) -> Project:
    _check_fields(changes, EXPENSE_FIELDS, "expense")
    normalized = {key: _normalize_entry_field(key, value) for key, value in changes.items()}
    return replace(
        project, expenses=_update_entry(project.expenses, expense_id, "expense", normalized)
    )


def delete_expense(project: Project, expense_id: str) -> Project:
    return replace(project, expenses=_remove_entry(project.expenses, expense_id, "expense"))
