"""
Tests for composable filter specifications.
"""

from decimal import Decimal

import pytest

from laptopshop.domain.exceptions import InvalidFilterException
from laptopshop.models import Laptop
from laptopshop.repositories.filters import Filter, FilterGroup, Not, where


class TestFilterConstruction:
    """Test building filter values."""

    def test_default_operator_is_equality(self):
        """Test that a bare Filter compares for equality."""
        spec = Filter("brand", value="Dell")
        assert spec.op == "eq"

    def test_unknown_operator_rejected(self):
        """Test that an unknown operator fails at construction."""
        with pytest.raises(InvalidFilterException) as exc_info:
            Filter("brand", "like", "Dell")
        assert "like" in str(exc_info.value)

    def test_and_or_not_compose(self):
        """Test operator overloads build groups and negations."""
        dell = Filter("brand", "eq", "Dell")
        cheap = Filter("price", "lte", 1000)

        both = dell & cheap
        either = dell | cheap
        negated = ~dell

        assert isinstance(both, FilterGroup)
        assert both.conjunction == "and"
        assert both.filters == (dell, cheap)
        assert either.conjunction == "or"
        assert isinstance(negated, Not)
        assert negated.spec == dell

    def test_filters_are_values(self):
        """Test that equal filters compare equal and hash alike."""
        assert Filter("stock", "gt", 0) == Filter("stock", "gt", 0)
        assert hash(Filter("stock", "gt", 0)) == hash(Filter("stock", "gt", 0))

    def test_unknown_field_rejected_on_translation(self):
        """Test that naming a missing column raises before any SQL runs."""
        with pytest.raises(InvalidFilterException) as exc_info:
            Filter("colour", "eq", "black").to_clause(Laptop)
        assert exc_info.value.details["field"] == "colour"


class TestWhere:
    """Test lookup-style filter construction."""

    def test_single_lookup_returns_filter(self):
        """Test that one keyword gives a plain Filter."""
        assert where(brand="Dell") == Filter("brand", "eq", "Dell")

    def test_operator_suffix(self):
        """Test field__op keywords."""
        assert where(price__lte=1500) == Filter("price", "lte", 1500)

    def test_multiple_lookups_are_anded(self):
        """Test that several keywords build an AND group."""
        spec = where(brand="Dell", stock__gt=0)
        assert isinstance(spec, FilterGroup)
        assert spec.conjunction == "and"
        assert set(spec.filters) == {
            Filter("brand", "eq", "Dell"),
            Filter("stock", "gt", 0),
        }

    def test_empty_lookups_rejected(self):
        """Test that where() with nothing to filter on raises."""
        with pytest.raises(InvalidFilterException):
            where()

    def test_unknown_operator_suffix_rejected(self):
        """Test that a misspelled suffix raises."""
        with pytest.raises(InvalidFilterException):
            where(price__below=10)


class TestFilterEvaluation:
    """Test filters evaluated by the database."""

    def test_comparison_operators(self, uow, catalog):
        """Test numeric comparisons."""
        assert [l.model for l in uow.laptops.find(Filter("price", "lt", Decimal("2000")))] == [
            "Legion 5"
        ]
        assert [l.model for l in uow.laptops.find(Filter("stock", "gte", 5))] == ["XPS 15"]
        assert len(uow.laptops.find(Filter("brand", "ne", "Dell"))) == 1

    def test_in_and_not_in(self, uow, catalog):
        """Test membership operators."""
        found = uow.laptops.find(Filter("id", "in", [catalog["xps"], catalog["legion"]]))
        assert len(found) == 2
        found = uow.laptops.find(Filter("id", "not_in", [catalog["xps"]]))
        assert [l.id for l in found] == [catalog["legion"]]

    def test_string_operators(self, uow, catalog):
        """Test substring, prefix and suffix matching."""
        assert [l.model for l in uow.laptops.find(Filter("model", "contains", "XPS"))] == [
            "XPS 15"
        ]
        assert [l.brand for l in uow.laptops.find(Filter("brand", "icontains", "LENO"))] == [
            "Lenovo"
        ]
        assert len(uow.laptops.find(Filter("model", "startswith", "Legion"))) == 1
        assert len(uow.laptops.find(Filter("model", "endswith", "15"))) == 1

    def test_wildcards_are_escaped(self, uow, catalog):
        """Test that % in a contains value is matched literally."""
        assert uow.laptops.find(Filter("model", "contains", "%")) == []

    def test_is_null(self, uow, catalog):
        """Test null checks."""
        without_description = uow.laptops.find(Filter("description", "is_null", True))
        with_description = uow.laptops.find(Filter("description", "is_null", False))
        assert [l.model for l in without_description] == ["Legion 5"]
        assert [l.model for l in with_description] == ["XPS 15"]

    def test_combined_filters(self, uow, catalog):
        """Test AND, OR and NOT groups."""
        dell = Filter("brand", "eq", "Dell")
        lenovo = Filter("brand", "eq", "Lenovo")

        assert len(uow.laptops.find(dell | lenovo)) == 2
        assert uow.laptops.find(dell & lenovo) == []
        assert [l.brand for l in uow.laptops.find(~dell)] == ["Lenovo"]
        assert [l.brand for l in uow.laptops.find(where(brand="Dell", stock__gt=0))] == [
            "Dell"
        ]

    def test_no_match_returns_empty_list(self, uow, catalog):
        """Test that a filter matching nothing is an empty list, not an error."""
        assert uow.laptops.find(where(brand="Apple")) == []
