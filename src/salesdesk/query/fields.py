"""Sale field registry: JSON field names, storage attributes and field kinds."""

from typing import Dict

# JSON (camelCase) field name -> model attribute name
SALE_FIELDS: Dict[str, str] = {
    "id": "id",
    "transactionId": "transaction_id",
    "date": "date",
    "customerId": "customer_id",
    "customerName": "customer_name",
    "phoneNumber": "phone_number",
    "gender": "gender",
    "age": "age",
    "customerRegion": "customer_region",
    "customerType": "customer_type",
    "productId": "product_id",
    "productName": "product_name",
    "brand": "brand",
    "productCategory": "product_category",
    "tags": "tags",
    "quantity": "quantity",
    "pricePerUnit": "price_per_unit",
    "discountPercentage": "discount_percentage",
    "totalAmount": "total_amount",
    "finalAmount": "final_amount",
    "paymentMethod": "payment_method",
    "orderStatus": "order_status",
    "deliveryType": "delivery_type",
    "storeId": "store_id",
    "storeLocation": "store_location",
    "salespersonId": "salesperson_id",
    "employeeName": "employee_name",
}

MULTI_VALUED_FIELDS = frozenset({"tags"})

SORTABLE_FIELDS = frozenset(name for name in SALE_FIELDS if name not in MULTI_VALUED_FIELDS)

DEFAULT_SORT_FIELD = "date"


def is_multi_valued(field: str) -> bool:
    return field in MULTI_VALUED_FIELDS
