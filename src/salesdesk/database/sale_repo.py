"""Repository functions for sale records."""

from collections import defaultdict
from typing import Dict, Iterable, List, Optional, Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..errors import StoreError
from ..query.builder import MAX_WHOLE_NUMBER, SortKey
from ..query.predicates import Predicate
from .predicate_sql import predicate_to_clause, sale_column
from .schema import Sale, SaleTag


def count_sales(session: Session, predicate: Predicate) -> int:
    """
    Count sales matching the predicate, ignoring any pagination.

    Raises:
        StoreError: If the query fails to execute
    """
    try:
        return session.query(Sale).filter(predicate_to_clause(predicate)).count()
    except SQLAlchemyError as exc:
        raise StoreError(f"Failed to count sales: {exc}") from exc


def query_sales_window(
    session: Session,
    predicate: Predicate,
    sort: SortKey,
    offset: int,
    limit: int,
) -> List[Sale]:
    """
    Fetch one window of matching sales.

    Rows are ordered by the sort key, then by id ascending so that equal sort
    values still page deterministically.

    Args:
        session: SQLAlchemy session
        predicate: Filter predicate tree
        sort: Resolved sort key
        offset: Number of matching rows to skip
        limit: Maximum number of rows to return

    Returns:
        List of Sale rows (possibly empty)

    Raises:
        StoreError: If the query fails to execute
    """
    if offset > MAX_WHOLE_NUMBER:
        # past every row the store can address
        return []
    column = sale_column(sort.field)
    order = column.desc() if sort.descending else column.asc()
    try:
        return (
            session.query(Sale)
            .filter(predicate_to_clause(predicate))
            .order_by(order, Sale.id.asc())
            .offset(offset)
            .limit(limit)
            .all()
        )
    except SQLAlchemyError as exc:
        raise StoreError(f"Failed to query sales: {exc}") from exc


def find_sale_by_id(session: Session, sale_id: int) -> Optional[Sale]:
    """Return the sale with this id, or None."""
    try:
        return session.get(Sale, sale_id)
    except SQLAlchemyError as exc:
        raise StoreError(f"Failed to load sale {sale_id}: {exc}") from exc


def load_tags_by_sale(session: Session, sale_ids: Sequence[int]) -> Dict[int, List[str]]:
    """Load tags for the given sales, keyed by sale id, in insertion order."""
    tags: Dict[int, List[str]] = defaultdict(list)
    if not sale_ids:
        return tags
    try:
        rows = (
            session.query(SaleTag.sale_id, SaleTag.tag)
            .filter(SaleTag.sale_id.in_(list(sale_ids)))
            .order_by(SaleTag.sale_id, SaleTag.id)
            .all()
        )
    except SQLAlchemyError as exc:
        raise StoreError(f"Failed to load tags: {exc}") from exc
    for sale_id, tag in rows:
        tags[sale_id].append(tag)
    return tags


def add_sale(session: Session, *, tags: Iterable[str] = (), **fields) -> Sale:
    """
    Stage a new sale row and its tags on the session (caller commits).

    Args:
        session: SQLAlchemy session
        tags: Tag strings for the sale
        **fields: Sale column values (snake_case)

    Returns:
        The new Sale row, flushed so its id is assigned
    """
    row = Sale(**fields)
    session.add(row)
    session.flush()
    for tag in tags:
        session.add(SaleTag(sale_id=row.id, tag=tag))
    return row
