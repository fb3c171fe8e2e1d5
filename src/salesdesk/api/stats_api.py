"""Page-local sales stats.

These totals cover only the records handed in (one page), never the whole
filtered result set.
"""

from typing import Iterable

from .models import PageStats, SaleRecord


def summarize_page(records: Iterable[SaleRecord]) -> PageStats:
    """
    Sum units, revenue and discount over a page of records.

    Missing numeric values count as zero. Discount per record is
    ``total_amount - final_amount``.
    """
    units = 0
    amount = 0.0
    discount = 0.0
    for record in records:
        total = record.total_amount or 0.0
        units += record.quantity or 0
        amount += total
        discount += total - (record.final_amount or 0.0)
    return PageStats(
        total_units=units,
        total_amount=round(amount, 2),
        total_discount=round(discount, 2),
    )
