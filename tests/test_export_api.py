"""Tests for CSV export contracts."""

import csv
from datetime import date, datetime
from io import StringIO

from salesdesk.api.export import CSV_HEADERS, default_export_filename, export_page_csv
from salesdesk.api.models import SaleRecord


def _record(**fields):
    base = {
        "id": 1,
        "transaction_id": 1001,
        "date": datetime(2023, 3, 15, 10, 30),
        "customer_id": "CUST-1",
        "customer_name": "Asha Verma",
        "phone_number": "9876543210",
        "gender": "Female",
        "age": 30,
        "customer_region": "North",
        "customer_type": "New",
        "product_id": "PROD-9",
        "product_name": "Lipstick",
        "brand": "Glow",
        "product_category": "Beauty",
        "tags": ["makeup"],
        "quantity": 3,
        "price_per_unit": 100.0,
        "discount_percentage": 10.0,
        "total_amount": 300.0,
        "final_amount": 270.0,
        "payment_method": "UPI",
        "order_status": "Completed",
        "store_location": "Delhi",
    }
    base.update(fields)
    return SaleRecord(**base)


def test_export_has_fixed_header_and_one_row_per_record():
    records = [_record(id=1), _record(id=2, transaction_id=1002)]

    output = export_page_csv(records)
    lines = output.split("\n")

    required_columns = [
        "Transaction ID", "Date", "Customer ID", "Customer Name", "Phone Number",
        "Gender", "Age", "Region", "Customer Type", "Product Name", "Brand",
        "Category", "Quantity", "Price/Unit", "Discount %", "Total Amount",
        "Final Amount", "Payment Method", "Order Status", "Store Location",
    ]
    assert CSV_HEADERS == required_columns
    assert lines[0] == ",".join(required_columns)
    assert len(lines) == len(records) + 1
    assert not output.endswith("\n")


def test_export_row_values_are_quoted_and_formatted():
    output = export_page_csv([_record()])
    row = output.split("\n")[1]

    assert row == (
        '"1001","2023-03-15","CUST-1","Asha Verma","9876543210","Female","30","North","New",'
        '"Lipstick","Glow","Beauty","3","100","10","300","270","UPI","Completed","Delhi"'
    )


def test_export_escapes_embedded_quotes_and_commas():
    output = export_page_csv([_record(customer_name='Rao, "Jr"', price_per_unit=99.5)])

    parsed = list(csv.reader(StringIO(output)))
    assert parsed[1][3] == 'Rao, "Jr"'
    assert parsed[1][13] == "99.5"
    assert all(len(row) == 20 for row in parsed)


def test_export_missing_values_are_empty():
    row = export_page_csv([_record(brand=None, date=None)]).split("\n")[1]
    cells = next(csv.reader(StringIO(row)))

    assert cells[1] == ""
    assert cells[10] == ""


def test_export_empty_page_is_header_only():
    assert export_page_csv([]) == ",".join(CSV_HEADERS)


def test_export_writes_file(tmp_path):
    out = tmp_path / "page.csv"

    message = export_page_csv([_record()], out=out)

    assert message == f"Exported to {out}"
    assert out.read_text(encoding="utf-8") == export_page_csv([_record()])


def test_default_export_filename():
    assert default_export_filename(date(2024, 2, 29)) == "sales-export-2024-02-29.csv"
