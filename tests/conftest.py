"""Pytest configuration and fixtures."""

from datetime import datetime

import pytest

from salesdesk.database.sale_repo import add_sale
from salesdesk.database.sqlite_client import get_session_factory


def sale_fields(**overrides):
    """Column values for one plausible sale; keyword overrides win."""
    fields = {
        "transaction_id": 1,
        "date": datetime(2023, 3, 15),
        "customer_id": "CUST-0001",
        "customer_name": "Asha Verma",
        "phone_number": "9876543210",
        "gender": "Female",
        "age": 30,
        "customer_region": "North",
        "customer_type": "Returning",
        "product_id": "PROD-0001",
        "product_name": "Cotton Shirt",
        "brand": "Weave",
        "product_category": "Clothing",
        "quantity": 1,
        "price_per_unit": 100.0,
        "discount_percentage": 0.0,
        "total_amount": 100.0,
        "final_amount": 100.0,
        "payment_method": "UPI",
        "order_status": "Completed",
        "delivery_type": "Standard",
        "store_id": "ST-01",
        "store_location": "Delhi",
        "salesperson_id": "EMP-01",
        "employee_name": "Ravi Kumar",
    }
    fields.update(overrides)
    return fields


@pytest.fixture
def sqlite_path(tmp_path):
    return str(tmp_path / "sales.db")


@pytest.fixture
def session_factory(sqlite_path):
    """File-backed SQLite so worker threads can open their own connections."""
    factory = get_session_factory(sqlite_path)
    yield factory
    factory.kw["bind"].dispose()


@pytest.fixture
def session(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def make_sale(session):
    """Insert one committed sale and return its id."""
    def _make(tags=(), **overrides):
        row = add_sale(session, tags=tags, **sale_fields(**overrides))
        session.commit()
        return row.id
    return _make
