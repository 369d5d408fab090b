"""Tests for snapshot editing functions."""

from datetime import date
from decimal import Decimal

import pytest

from eventbudget.domain import editing
from eventbudget.domain.entities import (
    AdvanceStatus,
    BudgetCategory,
    Currency,
    CustomRate,
    DEFAULT_CLIENT,
    DEFAULT_EXCHANGE_RATE,
    DEFAULT_SERVICE_FEE_PERCENT,
    FixedRate,
    PaymentType,
)
from eventbudget.domain.errors import NotFoundError, ValidationError


class TestNewProject:
    """Tests for project creation."""

    def test_defaults(self):
        project = editing.new_project()

        assert project.id
        assert project.name == ""
        assert project.client == DEFAULT_CLIENT
        assert project.date == date.today()
        assert project.currency == Currency.EUR
        assert project.exchange_rate == DEFAULT_EXCHANGE_RATE
        assert project.is_international is False
        assert project.service_fee_percent == DEFAULT_SERVICE_FEE_PERCENT
        for category in BudgetCategory:
            assert project.categories.items(category) == ()
        assert project.payments == ()
        assert project.advances == ()
        assert project.expenses == ()

    def test_default_vat_rates(self):
        project = editing.new_project()
        rates = {entry.category: entry.rate for entry in project.category_vat_rates}

        assert len(project.category_vat_rates) == 5
        assert rates[BudgetCategory.ACCOMMODATION] == FixedRate(Decimal("12"))
        assert rates[BudgetCategory.REGISTRATION] == FixedRate(Decimal("20"))

    def test_ids_are_unique(self):
        assert editing.new_project().id != editing.new_project().id

    def test_fields_are_applied(self):
        project = editing.new_project(name="Summit", currency="usd", exchange_rate="34.2")
        assert project.name == "Summit"
        assert project.currency == Currency.USD
        assert project.exchange_rate == Decimal("34.2")


class TestUpdateProject:
    """Tests for descriptive field updates and validation."""

    def test_returns_new_snapshot(self, sample_project):
        updated = editing.update_project(sample_project, name="Renamed")
        assert updated is not sample_project
        assert updated.name == "Renamed"
        assert sample_project.name == "ECC 2025"

    def test_date_string(self, sample_project):
        updated = editing.update_project(sample_project, date="2025-09-01")
        assert updated.date == date(2025, 9, 1)

    def test_invalid_date(self, sample_project):
        with pytest.raises(ValidationError, match="Could not parse date"):
            editing.update_project(sample_project, date="not a date")

    def test_unknown_currency(self, sample_project):
        with pytest.raises(ValidationError, match="Invalid currency"):
            editing.update_project(sample_project, currency="JPY")

    @pytest.mark.parametrize("rate", ["0", "-5", "abc"])
    def test_non_positive_exchange_rate(self, sample_project, rate):
        with pytest.raises(ValidationError, match="Exchange rate"):
            editing.update_project(sample_project, exchange_rate=rate)

    @pytest.mark.parametrize("fee", ["-1", "100.5"])
    def test_service_fee_range(self, sample_project, fee):
        with pytest.raises(ValidationError, match="between 0 and 100"):
            editing.update_project(sample_project, service_fee_percent=fee)

    def test_unknown_field(self, sample_project):
        with pytest.raises(ValidationError, match="Unknown project field"):
            editing.update_project(sample_project, budget=5)


class TestBudgetItems:
    """Tests for adding, updating and deleting budget items."""

    def test_add_computes_total(self, sample_project):
        project = editing.add_budget_item(sample_project, "transfer", "Airport shuttle", 4, "35.5")
        item = project.categories.items("transfer")[-1]

        assert item.quantity == 4
        assert item.unit_price == Decimal("35.5")
        assert item.total == Decimal("142.0")

    def test_add_does_not_touch_other_categories(self, sample_project):
        project = editing.add_budget_item(sample_project, "transfer", "Shuttle", 1, 10)
        assert project.categories.registration is sample_project.categories.registration
        assert sample_project.categories.items("transfer") == ()

    def test_add_defaults(self, sample_project):
        project = editing.add_budget_item(sample_project, "sponsorship")
        item = project.categories.items("sponsorship")[0]
        assert item.description == ""
        assert item.quantity == 1
        assert item.unit_price == 0
        assert item.total == 0

    @pytest.mark.parametrize(
        "quantity,unit_price,expected_quantity,expected_price",
        [
            ("abc", "100", 0, Decimal("100")),
            ("3", "xyz", 3, Decimal("0")),
            ("2.7", "10", 2, Decimal("10")),
            ("-4", "-10", 0, Decimal("0")),
            ("", "", 0, Decimal("0")),
        ],
    )
    def test_invalid_input_is_coerced(self, sample_project, quantity, unit_price, expected_quantity, expected_price):
        project = editing.add_budget_item(sample_project, "other", "Coerced", quantity, unit_price)
        item = project.categories.items("other")[-1]
        assert item.quantity == expected_quantity
        assert item.unit_price == expected_price
        assert item.total == expected_quantity * expected_price

    def test_update_recomputes_total(self, sample_project):
        item = sample_project.categories.items("registration")[0]
        project = editing.update_budget_item(sample_project, "registration", item.id, quantity="5")
        updated = project.categories.items("registration")[0]

        assert updated.id == item.id
        assert updated.quantity == 5
        assert updated.unit_price == item.unit_price
        assert updated.total == Decimal("500")

    def test_update_description_only(self, sample_project):
        item = sample_project.categories.items("registration")[0]
        project = editing.update_budget_item(sample_project, "registration", item.id, description="Late fee")
        updated = project.categories.items("registration")[0]
        assert updated.description == "Late fee"
        assert updated.total == item.total

    def test_update_unknown_item(self, sample_project):
        with pytest.raises(NotFoundError, match="not found in category 'registration'"):
            editing.update_budget_item(sample_project, "registration", "missing", quantity=1)

    def test_update_unknown_field(self, sample_project):
        item = sample_project.categories.items("registration")[0]
        with pytest.raises(ValidationError):
            editing.update_budget_item(sample_project, "registration", item.id, total=5)

    def test_delete_removes_exactly_one(self, sample_project):
        project = editing.add_budget_item(sample_project, "registration", "Second", 1, 50)
        first, second = project.categories.items("registration")

        remaining = editing.delete_budget_item(project, "registration", first.id)
        assert remaining.categories.items("registration") == (second,)
        assert remaining.categories.accommodation == project.categories.accommodation

    def test_delete_unknown_item(self, sample_project):
        with pytest.raises(NotFoundError):
            editing.delete_budget_item(sample_project, "other", "missing")

    def test_unknown_category(self, sample_project):
        with pytest.raises(ValidationError, match="Unknown budget category"):
            editing.add_budget_item(sample_project, "catering", "Lunch", 1, 10)


class TestVatRates:
    """Tests for VAT rate selection."""

    def test_set_fixed_rate_in_place(self, sample_project):
        project = editing.set_vat_rate(sample_project, "accommodation", "8")
        categories = [entry.category for entry in project.category_vat_rates]

        assert categories == [entry.category for entry in sample_project.category_vat_rates]
        assert project.category_vat_rates[1].rate == FixedRate(Decimal("8"))

    def test_set_custom_rate(self, sample_project):
        project = editing.set_vat_rate(sample_project, "other", "custom", "7.5")
        entry = next(e for e in project.category_vat_rates if e.category == BudgetCategory.OTHER)
        assert entry.rate == CustomRate(Decimal("7.5"))

    def test_set_appends_missing_entry(self, sample_project):
        from dataclasses import replace

        project = replace(sample_project, category_vat_rates=())
        project = editing.set_vat_rate(project, "transfer", 10)
        assert len(project.category_vat_rates) == 1
        assert project.category_vat_rates[0].category == BudgetCategory.TRANSFER

    def test_rejects_non_canonical_rate(self, sample_project):
        with pytest.raises(ValidationError, match="VAT rate must be one of"):
            editing.set_vat_rate(sample_project, "other", 15)

    def test_rejects_custom_rate_out_of_range(self, sample_project):
        with pytest.raises(ValidationError, match="between 0 and 100"):
            editing.set_vat_rate(sample_project, "other", "custom", "150")

    def test_vat_rate_from_sentinel(self):
        assert editing.vat_rate_from_input(-1) == CustomRate()
        assert editing.vat_rate_from_input("12") == FixedRate(Decimal("12"))

    @pytest.mark.parametrize("rate", ["abc", "", None, "NaN"])
    def test_rejects_unparseable_rate(self, rate):
        with pytest.raises(ValidationError, match="VAT rate must be one of"):
            editing.vat_rate_from_input(rate)

    def test_rejects_unparseable_custom_rate(self, sample_project):
        with pytest.raises(ValidationError, match="Custom VAT rate must be a number"):
            editing.set_vat_rate(sample_project, "other", "custom", "abc")


class TestPayments:
    """Tests for payment editing."""

    def test_add_payment(self, sample_project):
        project = editing.add_payment(sample_project, "incoming", "2025-06-01", "Balance", "1,500.00")
        payment = project.payments[-1]

        assert payment.type == PaymentType.INCOMING
        assert payment.date == date(2025, 6, 1)
        assert payment.amount == Decimal("1500.00")
        assert len(project.payments) == len(sample_project.payments) + 1

    def test_add_payment_defaults_date_to_today(self, sample_project):
        project = editing.add_payment(sample_project, "outgoing")
        assert project.payments[-1].date == date.today()
        assert project.payments[-1].amount == 0

    def test_invalid_payment_type(self, sample_project):
        with pytest.raises(ValidationError, match="Invalid payment type"):
            editing.add_payment(sample_project, "sideways")

    def test_update_payment(self, sample_project):
        payment = sample_project.payments[0]
        project = editing.update_payment(sample_project, payment.id, amount="450", type="outgoing")

        assert project.payments[0].amount == Decimal("450")
        assert project.payments[0].type == PaymentType.OUTGOING
        assert project.payments[1] == sample_project.payments[1]

    def test_update_unknown_payment(self, sample_project):
        with pytest.raises(NotFoundError, match="Payment 'missing' not found"):
            editing.update_payment(sample_project, "missing", amount=1)

    def test_delete_payment(self, sample_project):
        incoming, outgoing = sample_project.payments
        project = editing.delete_payment(sample_project, incoming.id)
        assert project.payments == (outgoing,)


class TestAdvances:
    """Tests for advance editing."""

    def test_add_advance_is_pending(self, sample_project):
        project = editing.add_advance(sample_project, amount="750", supplier="Bus Co")
        advance = project.advances[-1]
        assert advance.status == AdvanceStatus.PENDING
        assert advance.supplier == "Bus Co"
        assert advance.amount == Decimal("750")

    def test_close_and_reopen(self, sample_project):
        advance_id = sample_project.advances[0].id
        closed = editing.close_advance(sample_project, advance_id)
        assert closed.advances[0].status == AdvanceStatus.CLOSED

        reopened = editing.reopen_advance(closed, advance_id)
        assert reopened.advances[0].status == AdvanceStatus.PENDING

    def test_update_advance_supplier(self, sample_project):
        advance_id = sample_project.advances[0].id
        project = editing.update_advance(sample_project, advance_id, supplier="Marriott")
        assert project.advances[0].supplier == "Marriott"
        assert project.advances[0].amount == sample_project.advances[0].amount

    def test_delete_advance(self, sample_project):
        project = editing.delete_advance(sample_project, sample_project.advances[0].id)
        assert project.advances == ()

    def test_close_unknown_advance(self, sample_project):
        with pytest.raises(NotFoundError):
            editing.close_advance(sample_project, "missing")


class TestExpenses:
    """Tests for expense editing."""

    def test_add_expense_default_category(self, sample_project):
        project = editing.add_expense(sample_project, amount="12.5")
        assert project.expenses[-1].category == "other"
        assert project.expenses[-1].amount == Decimal("12.5")

    def test_invalid_amount_becomes_zero(self, sample_project):
        project = editing.add_expense(sample_project, amount="twelve")
        assert project.expenses[-1].amount == 0

    def test_update_expense(self, sample_project):
        expense_id = sample_project.expenses[0].id
        project = editing.update_expense(sample_project, expense_id, category="transfer", description="Taxi")
        assert project.expenses[0].category == "transfer"
        assert project.expenses[0].description == "Taxi"

    def test_delete_expense(self, sample_project):
        project = editing.add_expense(sample_project, description="Second", amount=5)
        first, second = project.expenses
        remaining = editing.delete_expense(project, first.id)
        assert remaining.expenses == (second,)
