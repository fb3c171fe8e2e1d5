"""Sales API: listing (filter + sort + paginate) and fetch-by-id."""

import math
from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait
from typing import TYPE_CHECKING, Callable, List

from sqlalchemy.orm import Session

from ..database.sale_repo import (
    count_sales,
    find_sale_by_id,
    load_tags_by_sale,
    query_sales_window,
)
from ..errors import RecordNotFoundError, StoreError, StoreTimeoutError
from ..query.builder import FilterSpec
from ..query.fields import SALE_FIELDS, is_multi_valued
from ..utils.logging import get_logger
from .models import PageEnvelope, SaleRecord

if TYPE_CHECKING:
    from ..database.schema import Sale

logger = get_logger(__name__)

DEFAULT_READ_TIMEOUT_SECONDS = 10.0

SessionFactory = Callable[[], Session]


def _sale_row_to_record(row: "Sale", tags: List[str]) -> SaleRecord:
    """Convert a Sale ORM row (plus its tags) to a SaleRecord."""
    values = {
        attr: getattr(row, attr)
        for field, attr in SALE_FIELDS.items()
        if not is_multi_valued(field)
    }
    return SaleRecord(tags=list(tags), **values)


def total_pages_for(total: int, limit: int) -> int:
    return math.ceil(total / limit) if total else 0


def _read_count(session_factory: SessionFactory, spec: FilterSpec) -> int:
    session = session_factory()
    try:
        return count_sales(session, spec.predicate)
    finally:
        session.close()


def _read_window(session_factory: SessionFactory, spec: FilterSpec) -> List[SaleRecord]:
    session = session_factory()
    try:
        rows = query_sales_window(session, spec.predicate, spec.sort, spec.offset, spec.limit)
        tags = load_tags_by_sale(session, [row.id for row in rows])
        return [_sale_row_to_record(row, tags.get(row.id, [])) for row in rows]
    finally:
        session.close()


def list_sales(
    session_factory: SessionFactory,
    spec: FilterSpec,
    *,
    timeout_seconds: float = DEFAULT_READ_TIMEOUT_SECONDS,
) -> PageEnvelope:
    """
    Run one listing request against the store.

    The count and the window fetch are independent reads; they run
    concurrently, each on its own session, and are awaited jointly.

    Args:
        session_factory: Zero-argument callable returning a new session
        spec: Filter specification from ``build_filter_spec``
        timeout_seconds: Upper bound on waiting for both reads

    Returns:
        PageEnvelope for the requested window. A page past the last one
        yields empty ``data`` with ``total``/``total_pages`` still set.

    Raises:
        StoreTimeoutError: If the reads do not finish in time
        StoreError: If either read fails
    """
    executor = ThreadPoolExecutor(max_workers=2, thread_name_prefix="salesdesk-read")
    try:
        count_future = executor.submit(_read_count, session_factory, spec)
        window_future = executor.submit(_read_window, session_factory, spec)
        done, pending = wait(
            (count_future, window_future),
            timeout=timeout_seconds,
            return_when=FIRST_EXCEPTION,
        )
        for future in (count_future, window_future):
            if future in done and future.exception() is not None:
                exc = future.exception()
                logger.error(f"Sales listing failed for filter {spec}: {exc}")
                if isinstance(exc, StoreError):
                    raise exc
                raise StoreError(f"Store read failed: {exc}") from exc
        if pending:
            logger.error(f"Sales listing timed out after {timeout_seconds}s for filter {spec}")
            raise StoreTimeoutError(f"Store reads exceeded {timeout_seconds}s")
        total = count_future.result()
        records = window_future.result()
    finally:
        # Do not block on a hung read; its thread finishes on its own.
        executor.shutdown(wait=False, cancel_futures=True)

    return PageEnvelope(
        data=records,
        page=spec.page,
        limit=spec.limit,
        total=total,
        total_pages=total_pages_for(total, spec.limit),
    )


def get_sale(session: Session, sale_id: int) -> SaleRecord:
    """
    Fetch one sale by id, ignoring any filter.

    Raises:
        RecordNotFoundError: If no sale has this id
        StoreError: If the lookup fails
    """
    row = find_sale_by_id(session, sale_id)
    if row is None:
        raise RecordNotFoundError(sale_id)
    tags = load_tags_by_sale(session, [row.id])
    return _sale_row_to_record(row, tags.get(row.id, []))
