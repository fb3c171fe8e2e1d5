"""Pydantic response models, serialised with camelCase aliases."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_json_dict(self) -> dict:
        return self.model_dump(by_alias=True, mode="json")


class SaleRecord(CamelModel):
    id: int
    transaction_id: Optional[int] = None
    date: Optional[datetime] = None

    customer_id: Optional[str] = None
    customer_name: Optional[str] = None
    phone_number: Optional[str] = None
    gender: Optional[str] = None
    age: Optional[int] = None
    customer_region: Optional[str] = None
    customer_type: Optional[str] = None

    product_id: Optional[str] = None
    product_name: Optional[str] = None
    brand: Optional[str] = None
    product_category: Optional[str] = None
    tags: List[str] = []

    quantity: Optional[int] = None
    price_per_unit: Optional[float] = None
    discount_percentage: Optional[float] = None
    total_amount: Optional[float] = None
    final_amount: Optional[float] = None

    payment_method: Optional[str] = None
    order_status: Optional[str] = None
    delivery_type: Optional[str] = None
    store_id: Optional[str] = None
    store_location: Optional[str] = None
    salesperson_id: Optional[str] = None
    employee_name: Optional[str] = None


class PageEnvelope(CamelModel):
    """One window of matching records plus pagination metadata."""
    data: List[SaleRecord]
    page: int
    limit: int
    total: int
    total_pages: int


class PageStats(CamelModel):
    """Aggregates over the records of the current page only."""
    total_units: int = 0
    total_amount: float = 0.0
    total_discount: float = 0.0
