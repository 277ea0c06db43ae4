"""
Composable filter specifications.

A filter is plain data (field, operator, value) combined with ``&``, ``|`` and
``~``. Stores translate it into a SQL ``WHERE`` clause so filtering happens in
the database.

Example:
    >>> spec = Filter("brand", "eq", "Dell") & Filter("price", "lte", 1500)
    >>> spec = where(brand="Dell", price__lte=1500)
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Tuple, Union

from sqlalchemy import and_, inspect, not_, or_
from sqlalchemy.sql.elements import ColumnElement

from ..domain.exceptions import InvalidFilterException

LOOKUP_SEPARATOR = "__"

OPERATORS: Dict[str, Callable[[Any, Any], ColumnElement]] = {
    "eq": lambda column, value: column == value,
    "ne": lambda column, value: column != value,
    "lt": lambda column, value: column < value,
    "lte": lambda column, value: column <= value,
    "gt": lambda column, value: column > value,
    "gte": lambda column, value: column >= value,
    "in": lambda column, value: column.in_(list(value)),
    "not_in": lambda column, value: column.not_in(list(value)),
    "contains": lambda column, value: column.contains(value, autoescape=True),
    "icontains": lambda column, value: column.icontains(value, autoescape=True),
    "startswith": lambda column, value: column.startswith(value, autoescape=True),
    "endswith": lambda column, value: column.endswith(value, autoescape=True),
    "is_null": lambda column, value: column.is_(None) if value else column.is_not(None),
}


class _Combinable:
    """Operator overloads shared by every filter node."""

    def __and__(self, other: "FilterSpec") -> "FilterGroup":
        return FilterGroup("and", (self, other))

    def __or__(self, other: "FilterSpec") -> "FilterGroup":
        return FilterGroup("or", (self, other))

    def __invert__(self) -> "Not":
        return Not(self)


@dataclass(frozen=True)
class Filter(_Combinable):
    """
    Single comparison against a mapped column.

    Attributes:
        field: Mapped column attribute name
        op: Operator name, one of ``OPERATORS``
        value: Right-hand operand
    """

    field: str
    op: str = "eq"
    value: Any = None

    def __post_init__(self):
        if self.op not in OPERATORS:
            raise InvalidFilterException(self.field, f"unknown operator '{self.op}'")

    def to_clause(self, model: type) -> ColumnElement:
        """Translate to a SQLAlchemy clause over ``model``."""
        columns = inspect(model).columns
        if self.field not in columns:
            raise InvalidFilterException(
                self.field, f"{model.__name__} has no column '{self.field}'"
            )
        return OPERATORS[self.op](getattr(model, self.field), self.value)


@dataclass(frozen=True)
class FilterGroup(_Combinable):
    """Conjunction or disjunction of filters."""

    conjunction: str
    filters: Tuple["FilterSpec", ...]

    def to_clause(self, model: type) -> ColumnElement:
        clauses = [spec.to_clause(model) for spec in self.filters]
        if self.conjunction == "and":
            return and_(*clauses)
        if self.conjunction == "or":
            return or_(*clauses)
        raise InvalidFilterException(
            "<group>", f"unknown conjunction '{self.conjunction}'"
        )


@dataclass(frozen=True)
class Not(_Combinable):
    """Negation of a filter."""

    spec: "FilterSpec"

    def to_clause(self, model: type) -> ColumnElement:
        return not_(self.spec.to_clause(model))


FilterSpec = Union[Filter, FilterGroup, Not]


def where(**lookups: Any) -> FilterSpec:
    """
    Build an AND filter from lookup-style keyword arguments.

    ``field=value`` means equality, ``field__op=value`` uses ``op``.

    Args:
        **lookups: Field lookups, e.g. ``brand="Dell", price__lte=1500``

    Returns:
        Filter specification

    Raises:
        InvalidFilterException: If no lookups are given or an operator is unknown
    """
    if not lookups:
        raise InvalidFilterException("<where>", "at least one lookup is required")

    filters = []
    for key, value in lookups.items():
        field, _, op = key.partition(LOOKUP_SEPARATOR)
        filters.append(Filter(field, op or "eq", value))

    if len(filters) == 1:
        return filters[0]
    return FilterGroup("and", tuple(filters))
