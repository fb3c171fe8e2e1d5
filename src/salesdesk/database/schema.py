from sqlalchemy import (
    Column,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
)
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class Sale(Base):
    __tablename__ = "sales"

    id = Column(Integer, primary_key=True, autoincrement=True)
    transaction_id = Column(Integer, nullable=True, index=True)
    date = Column(DateTime, nullable=True, index=True)  # naive UTC

    # Customer
    customer_id = Column(String)
    customer_name = Column(String, index=True)
    phone_number = Column(String)
    gender = Column(String)
    age = Column(Integer)
    customer_region = Column(String)
    customer_type = Column(String)

    # Product
    product_id = Column(String)
    product_name = Column(String)
    brand = Column(String)
    product_category = Column(String)

    # Pricing
    quantity = Column(Integer)
    price_per_unit = Column(Float)
    discount_percentage = Column(Float)
    total_amount = Column(Float)
    final_amount = Column(Float)

    # Order / store
    payment_method = Column(String)
    order_status = Column(String)
    delivery_type = Column(String)
    store_id = Column(String)
    store_location = Column(String)
    salesperson_id = Column(String)
    employee_name = Column(String)


class SaleTag(Base):
    """One row per (sale, tag); tags are an unordered multi-valued field of Sale."""
    __tablename__ = "sale_tags"

    id = Column(Integer, primary_key=True, autoincrement=True)
    sale_id = Column(Integer, ForeignKey("sales.id"), nullable=False)
    tag = Column(String, nullable=False)

    __table_args__ = (
        Index("idx_sale_tags_tag_sale", "tag", "sale_id"),
        Index("idx_sale_tags_sale", "sale_id"),
    )
