"""Translate predicate variants into SQLAlchemy clauses over the sales table."""

from sqlalchemy import and_, false, func, or_, select, true
from sqlalchemy.sql.elements import ColumnElement

from ..query.fields import SALE_FIELDS, is_multi_valued
from ..query.predicates import And, Equals, InSet, Or, Predicate, Range, SubstringMatch
from .schema import Sale, SaleTag

LIKE_ESCAPE = "\\"


def escape_like(term: str) -> str:
    """Escape LIKE metacharacters so the term matches literally."""
    return (
        term.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )


def sale_column(field: str):
    """Resolve a JSON field name to its Sale column."""
    if field not in SALE_FIELDS or is_multi_valued(field):
        raise ValueError(f"No scalar column for field {field!r}")
    return getattr(Sale, SALE_FIELDS[field])


def _sales_with_tags(condition: ColumnElement) -> ColumnElement:
    return Sale.id.in_(select(SaleTag.sale_id).where(condition))


def predicate_to_clause(predicate: Predicate) -> ColumnElement:
    """
    Build the SQL clause for a predicate tree.

    An empty And is TRUE and an empty Or is FALSE, mirroring
    ``Predicate.matches``.
    """
    if isinstance(predicate, And):
        clauses = [predicate_to_clause(p) for p in predicate.predicates]
        return and_(*clauses) if clauses else true()

    if isinstance(predicate, Or):
        clauses = [predicate_to_clause(p) for p in predicate.predicates]
        return or_(*clauses) if clauses else false()

    if isinstance(predicate, Equals):
        if is_multi_valued(predicate.field):
            return _sales_with_tags(SaleTag.tag == predicate.value)
        return sale_column(predicate.field) == predicate.value

    if isinstance(predicate, InSet):
        values = list(predicate.values)
        if is_multi_valued(predicate.field):
            return _sales_with_tags(SaleTag.tag.in_(values))
        return sale_column(predicate.field).in_(values)

    if isinstance(predicate, Range):
        column = sale_column(predicate.field)
        bounds = []
        if predicate.low is not None:
            bounds.append(column >= predicate.low)
        if predicate.high is not None:
            bounds.append(column <= predicate.high)
        return and_(*bounds)

    if isinstance(predicate, SubstringMatch):
        column = sale_column(predicate.field)
        pattern = f"%{escape_like(predicate.needle.lower())}%"
        return func.lower(column).like(pattern, escape=LIKE_ESCAPE)

    raise TypeError(f"Unsupported predicate: {predicate!r}")
