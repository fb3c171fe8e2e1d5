from .builder import FilterSpec, SortKey, build_filter_spec
from .predicates import And, Equals, InSet, Or, Predicate, Range, SubstringMatch

__all__ = [
    "And",
    "Equals",
    "FilterSpec",
    "InSet",
    "Or",
    "Predicate",
    "Range",
    "SortKey",
    "SubstringMatch",
    "build_filter_spec",
]
