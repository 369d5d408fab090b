"""Tests for domain entities."""

import dataclasses
from decimal import Decimal

import pytest

from eventbudget.domain.entities import (
    BudgetCategories,
    BudgetCategory,
    BudgetItem,
    CustomRate,
    FixedRate,
    default_category_vat_rates,
)
from eventbudget.domain.errors import DomainError, ValidationError


class TestBudgetItem:
    """Tests for BudgetItem entity."""

    def test_total_is_computed(self):
        item = BudgetItem(id="1", description="Hotel", quantity=3, unit_price=Decimal("120.50"))
        assert item.total == Decimal("361.50")

    def test_total_follows_replace(self):
        item = BudgetItem(id="1", description="Hotel", quantity=3, unit_price=Decimal("100"))
        changed = dataclasses.replace(item, quantity=4)
        assert changed.total == Decimal("400")

    def test_total_cannot_be_passed(self):
        with pytest.raises(TypeError):
            BudgetItem(id="1", description="", quantity=1, unit_price=Decimal("1"), total=Decimal("5"))

    def test_is_immutable(self):
        item = BudgetItem(id="1", description="Hotel", quantity=1, unit_price=Decimal("10"))
        with pytest.raises(dataclasses.FrozenInstanceError):
            item.quantity = 2


class TestBudgetCategory:
    """Tests for category key parsing."""

    def test_parse_is_case_insensitive(self):
        assert BudgetCategory.parse("Accommodation") == BudgetCategory.ACCOMMODATION
        assert BudgetCategory.parse(" other ") == BudgetCategory.OTHER

    def test_parse_passes_members_through(self):
        assert BudgetCategory.parse(BudgetCategory.TRANSFER) is BudgetCategory.TRANSFER

    def test_parse_unknown(self):
        with pytest.raises(ValidationError, match="Unknown budget category 'catering'"):
            BudgetCategory.parse("catering")

    def test_display_order(self):
        assert [c.value for c in BudgetCategory] == [
            "registration",
            "accommodation",
            "transfer",
            "sponsorship",
            "other",
        ]


class TestBudgetCategories:
    """Tests for the five-category container."""

    def test_starts_empty(self):
        categories = BudgetCategories()
        assert list(categories.all_items()) == []
        for category in BudgetCategory:
            assert categories.items(category) == ()

    def test_with_items_replaces_one_category(self):
        item = BudgetItem(id="1", description="Booth", quantity=1, unit_price=Decimal("900"))
        categories = BudgetCategories().with_items("sponsorship", [item])

        assert categories.sponsorship == (item,)
        assert categories.registration == ()
        assert list(categories.all_items()) == [item]


def test_vat_rate_variants_are_distinct():
    assert FixedRate(Decimal("0")) != CustomRate(Decimal("0"))
    assert CustomRate().percent is None


def test_default_vat_rates_cover_every_category():
    rates = default_category_vat_rates()
    assert [entry.category for entry in rates] == list(BudgetCategory)


def test_domain_errors_are_value_errors():
    assert issubclass(ValidationError, DomainError)
    assert issubclass(DomainError, ValueError)
