import csv
from pathlib import Path
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from ..database.sale_repo import add_sale
from ..utils.logging import get_logger
from ..utils.time import parse_iso_datetime

logger = get_logger(__name__)

DEFAULT_BATCH_SIZE = 1000

TEXT_COLUMNS: Dict[str, str] = {
    "Customer ID": "customer_id",
    "Customer Name": "customer_name",
    "Phone Number": "phone_number",
    "Gender": "gender",
    "Customer Region": "customer_region",
    "Customer Type": "customer_type",
    "Product ID": "product_id",
    "Product Name": "product_name",
    "Brand": "brand",
    "Product Category": "product_category",
    "Payment Method": "payment_method",
    "Order Status": "order_status",
    "Delivery Type": "delivery_type",
    "Store ID": "store_id",
    "Store Location": "store_location",
    "Salesperson ID": "salesperson_id",
    "Employee Name": "employee_name",
}

INT_COLUMNS: Dict[str, str] = {
    "Transaction ID": "transaction_id",
    "Age": "age",
    "Quantity": "quantity",
}

FLOAT_COLUMNS: Dict[str, str] = {
    "Price per Unit": "price_per_unit",
    "Discount Percentage": "discount_percentage",
    "Total Amount": "total_amount",
    "Final Amount": "final_amount",
}


def _cell(row: Dict[str, Any], column: str) -> str:
    return (row.get(column) or "").strip()


def _to_int(column: str, value: str) -> Optional[int]:
    if not value:
        return None
    try:
        return int(value)
    except ValueError:
        # Some exports write whole numbers as "3.0"
        number = float(value)
        if not number.is_integer():
            raise ValueError(f"{column}: expected a whole number, got {value!r}")
        return int(number)


def _to_float(value: str) -> Optional[float]:
    return float(value) if value else None


def parse_tags(value: str) -> List[str]:
    """Split the Tags cell ("a,b" possibly with stray quotes) into tag strings."""
    cleaned = value.replace('"', "")
    return [tag.strip() for tag in cleaned.split(",") if tag.strip()]


def row_to_sale_fields(row: Dict[str, Any]) -> Dict[str, Any]:
    """
    Map one CSV row onto Sale column values.

    Raises:
        ValueError: If a numeric or date cell cannot be parsed
    """
    fields: Dict[str, Any] = {}
    for column, attr in TEXT_COLUMNS.items():
        fields[attr] = _cell(row, column) or None
    for column, attr in INT_COLUMNS.items():
        fields[attr] = _to_int(column, _cell(row, column))
    for column, attr in FLOAT_COLUMNS.items():
        fields[attr] = _to_float(_cell(row, column))
    date_value = _cell(row, "Date")
    fields["date"] = parse_iso_datetime(date_value) if date_value else None
    return fields


def load_sales_from_csv(
    csv_path: Path,
    session: Session,
    batch_size: int = DEFAULT_BATCH_SIZE,
) -> Dict[str, int]:
    """
    Load sales from CSV and insert into database.

    Expected CSV columns: Transaction ID, Date, Customer ID, Customer Name,
    Phone Number, Gender, Age, Customer Region, Customer Type, Product ID,
    Product Name, Brand, Product Category, Tags, Quantity, Price per Unit,
    Discount Percentage, Total Amount, Final Amount, Payment Method,
    Order Status, Delivery Type, Store ID, Store Location, Salesperson ID,
    Employee Name

    Rows with unparseable numbers or dates are skipped and counted.

    Returns:
        Dict with "loaded" and "skipped" row counts
    """
    if not csv_path.exists():
        raise FileNotFoundError(f"CSV file not found: {csv_path}")
    if batch_size <= 0:
        raise ValueError("batch_size must be positive")

    loaded = 0
    skipped = 0
    with csv_path.open("r", encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)
        for line_no, row in enumerate(reader, start=2):
            try:
                fields = row_to_sale_fields(row)
            except ValueError as e:
                logger.warning(f"Skipping {csv_path}:{line_no}: {e}")
                skipped += 1
                continue
            add_sale(session, tags=parse_tags(_cell(row, "Tags")), **fields)
            loaded += 1
            if loaded % batch_size == 0:
                session.commit()
                logger.debug(f"Committed {loaded} sales from {csv_path}")

    session.commit()
    logger.info(f"Loaded {loaded} sales from {csv_path} ({skipped} skipped)")
    return {"loaded": loaded, "skipped": skipped}
