"""Predicate variants that make up a Filter Specification.

Predicates are store-agnostic values. ``matches`` evaluates them against a
record mapping keyed by JSON field names; the database layer translates the
same values into SQL (see ``salesdesk.database.predicate_sql``).
"""

from dataclasses import dataclass
from typing import Any, Mapping, Tuple, Union

from .fields import is_multi_valued


@dataclass(frozen=True)
class Equals:
    field: str
    value: Any

    def matches(self, record: Mapping[str, Any]) -> bool:
        actual = record.get(self.field)
        if is_multi_valued(self.field):
            return self.value in (actual or ())
        return actual == self.value


@dataclass(frozen=True)
class InSet:
    """Field value is one of ``values``; for multi-valued fields, any value intersects."""
    field: str
    values: Tuple[Any, ...]

    def matches(self, record: Mapping[str, Any]) -> bool:
        actual = record.get(self.field)
        if is_multi_valued(self.field):
            return any(item in self.values for item in (actual or ()))
        return actual in self.values


@dataclass(frozen=True)
class Range:
    """Inclusive range; either bound may be omitted but not both."""
    field: str
    low: Any = None
    high: Any = None

    def __post_init__(self):
        if self.low is None and self.high is None:
            raise ValueError(f"Range on {self.field!r} needs at least one bound")

    def matches(self, record: Mapping[str, Any]) -> bool:
        actual = record.get(self.field)
        if actual is None:
            return False
        if self.low is not None and actual < self.low:
            return False
        if self.high is not None and actual > self.high:
            return False
        return True


@dataclass(frozen=True)
class SubstringMatch:
    """Case-insensitive literal substring match."""
    field: str
    needle: str

    def matches(self, record: Mapping[str, Any]) -> bool:
        actual = record.get(self.field)
        if actual is None:
            return False
        return self.needle.lower() in str(actual).lower()


@dataclass(frozen=True)
class And:
    predicates: Tuple["Predicate", ...] = ()

    def matches(self, record: Mapping[str, Any]) -> bool:
        return all(p.matches(record) for p in self.predicates)


@dataclass(frozen=True)
class Or:
    predicates: Tuple["Predicate", ...] = ()

    def matches(self, record: Mapping[str, Any]) -> bool:
        return any(p.matches(record) for p in self.predicates)


Predicate = Union[Equals, InSet, Range, SubstringMatch, And, Or]
