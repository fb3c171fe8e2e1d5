"""Query Builder: request parameters -> Filter Specification.

Pure and deterministic. No I/O, no clock, no randomness; the same parameter
mapping always yields an equal ``FilterSpec``.
"""

import re
from dataclasses import dataclass
from datetime import datetime
from typing import Any, List, Mapping, Optional, Tuple

from ..errors import ParameterValidationError
from ..utils.time import parse_iso_datetime
from .fields import DEFAULT_SORT_FIELD, SORTABLE_FIELDS
from .predicates import And, InSet, Or, Predicate, Range, SubstringMatch

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10

# SQLite INTEGER is a signed 64-bit value
MAX_WHOLE_NUMBER = 2**63 - 1
WHOLE_NUMBER_PATTERN = re.compile(r"[+-]?[0-9]+")

SEARCH_FIELDS = ("customerName", "phoneNumber")

# request parameter -> record field, in emission order
LIST_FILTERS: Tuple[Tuple[str, str], ...] = (
    ("regions", "customerRegion"),
    ("genders", "gender"),
    ("categories", "productCategory"),
    ("paymentMethods", "paymentMethod"),
    ("tags", "tags"),
)


@dataclass(frozen=True)
class SortKey:
    field: str = DEFAULT_SORT_FIELD
    descending: bool = True


@dataclass(frozen=True)
class FilterSpec:
    """Validated conjunction of predicates plus sort key and pagination window."""
    predicate: And
    sort: SortKey
    page: int
    limit: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    @property
    def is_unconstrained(self) -> bool:
        return not self.predicate.predicates


def _param(params: Mapping[str, Any], name: str) -> Optional[str]:
    """Return the trimmed parameter value, or None when absent or blank."""
    value = params.get(name)
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def split_csv(value: str) -> Tuple[str, ...]:
    """Split a comma-separated list, trimming tokens and dropping empties and repeats."""
    tokens: List[str] = []
    for token in value.split(","):
        token = token.strip()
        if token and token not in tokens:
            tokens.append(token)
    return tuple(tokens)


def parse_whole_number(name: str, value: str, *, minimum: int) -> int:
    """Parse plain decimal digits (optionally signed) within the store's integer range."""
    if not WHOLE_NUMBER_PATTERN.fullmatch(value):
        raise ParameterValidationError(name, f"must be a whole number, got {value!r}")
    negative = value.startswith("-")
    # int() refuses very long digit strings, so settle the magnitude first
    if len(value.lstrip("+-").lstrip("0")) > len(str(MAX_WHOLE_NUMBER)):
        number = None
    else:
        number = int(value)
    if (number is None and negative) or (number is not None and number < minimum):
        raise ParameterValidationError(name, f"must be >= {minimum}, got {value}")
    if number is None or number > MAX_WHOLE_NUMBER:
        raise ParameterValidationError(name, f"must be <= {MAX_WHOLE_NUMBER}, got {value}")
    return number


def parse_date_param(name: str, value: str) -> datetime:
    try:
        return parse_iso_datetime(value)
    except ValueError:
        raise ParameterValidationError(
            name, f"must be an ISO 8601 date (YYYY-MM-DD), got {value!r}"
        ) from None


def _range(field: str, low_name: str, low: Any, high_name: str, high: Any) -> Optional[Range]:
    if low is None and high is None:
        return None
    if low is not None and high is not None and low > high:
        raise ParameterValidationError(low_name, f"must not be greater than {high_name}")
    return Range(field, low=low, high=high)


def _age_range(params: Mapping[str, Any]) -> Optional[Range]:
    raw_min = _param(params, "minAge")
    raw_max = _param(params, "maxAge")
    low = parse_whole_number("minAge", raw_min, minimum=0) if raw_min is not None else None
    high = parse_whole_number("maxAge", raw_max, minimum=0) if raw_max is not None else None
    return _range("age", "minAge", low, "maxAge", high)


def _date_range(params: Mapping[str, Any]) -> Optional[Range]:
    raw_start = _param(params, "startDate")
    raw_end = _param(params, "endDate")
    start = parse_date_param("startDate", raw_start) if raw_start is not None else None
    end = parse_date_param("endDate", raw_end) if raw_end is not None else None
    return _range("date", "startDate", start, "endDate", end)


def _sort_key(params: Mapping[str, Any]) -> SortKey:
    field = _param(params, "sortBy") or DEFAULT_SORT_FIELD
    if field not in SORTABLE_FIELDS:
        raise ParameterValidationError("sortBy", f"unsupported sort field {field!r}")
    order = _param(params, "sortOrder")
    return SortKey(field=field, descending=order != "asc")


def build_filter_spec(
    params: Mapping[str, Any],
    *,
    default_limit: int = DEFAULT_LIMIT,
    max_limit: Optional[int] = None,
) -> FilterSpec:
    """
    Translate request parameters into a FilterSpec.

    Args:
        params: String-keyed request parameters; unknown keys are ignored
        default_limit: Page size used when ``limit`` is absent
        max_limit: Largest accepted page size (None for no cap)

    Returns:
        FilterSpec with every predicate ANDed (the search OR is one conjunct)

    Raises:
        ParameterValidationError: On malformed or out-of-range parameters
    """
    predicates: List[Predicate] = []

    search = _param(params, "search")
    if search:
        predicates.append(Or(tuple(SubstringMatch(field, search) for field in SEARCH_FIELDS)))

    for name, field in LIST_FILTERS:
        raw = _param(params, name)
        if raw is None:
            continue
        values = split_csv(raw)
        if values:
            predicates.append(InSet(field, values))

    for ranged in (_age_range(params), _date_range(params)):
        if ranged is not None:
            predicates.append(ranged)

    raw_page = _param(params, "page")
    raw_limit = _param(params, "limit")
    page = parse_whole_number("page", raw_page, minimum=1) if raw_page is not None else DEFAULT_PAGE
    limit = parse_whole_number("limit", raw_limit, minimum=1) if raw_limit is not None else default_limit
    if max_limit is not None and limit > max_limit:
        raise ParameterValidationError("limit", f"must be <= {max_limit}, got {limit}")

    return FilterSpec(
        predicate=And(tuple(predicates)),
        sort=_sort_key(params),
        page=page,
        limit=limit,
    )
