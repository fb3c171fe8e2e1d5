"""CSV export of the currently loaded page of sales."""

import csv
from datetime import date
from io import StringIO
from pathlib import Path
from typing import Any, List, Sequence, Tuple

from ..utils.time import format_day
from .models import SaleRecord

# (header, record attribute) in export order
CSV_COLUMNS: Tuple[Tuple[str, str], ...] = (
    ("Transaction ID", "transaction_id"),
    ("Date", "date"),
    ("Customer ID", "customer_id"),
    ("Customer Name", "customer_name"),
    ("Phone Number", "phone_number"),
    ("Gender", "gender"),
    ("Age", "age"),
    ("Region", "customer_region"),
    ("Customer Type", "customer_type"),
    ("Product Name", "product_name"),
    ("Brand", "brand"),
    ("Category", "product_category"),
    ("Quantity", "quantity"),
    ("Price/Unit", "price_per_unit"),
    ("Discount %", "discount_percentage"),
    ("Total Amount", "total_amount"),
    ("Final Amount", "final_amount"),
    ("Payment Method", "payment_method"),
    ("Order Status", "order_status"),
    ("Store Location", "store_location"),
)

CSV_HEADERS: List[str] = [header for header, _ in CSV_COLUMNS]


def _format_cell(attr: str, value: Any) -> str:
    if value is None:
        return ""
    if attr == "date":
        return format_day(value)
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def default_export_filename(day: date) -> str:
    return f"sales-export-{day.isoformat()}.csv"


def export_page_csv(records: Sequence[SaleRecord], out: Path | None = None) -> str:
    """
    Export a page of sales as CSV.

    Header row is unquoted; every data field is double-quoted. Rows are
    newline-joined with no trailing newline. Only ``records`` are exported,
    so callers get exactly the page they loaded.

    Args:
        records: Records of the current page
        out: Output file path (if None, returns the CSV text)

    Returns:
        CSV text (if out is None) or a confirmation message
    """
    buffer = StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    for record in records:
        writer.writerow([_format_cell(attr, getattr(record, attr)) for _, attr in CSV_COLUMNS])

    lines = [",".join(CSV_HEADERS)]
    body = buffer.getvalue()
    if body:
        lines.append(body[:-1])  # drop the final line terminator
    output = "\n".join(lines)

    if out:
        out.write_text(output, encoding="utf-8", newline="")
        return f"Exported to {out}"
    return output
