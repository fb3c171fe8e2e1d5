from .csv_importer import load_sales_from_csv

__all__ = [
    "load_sales_from_csv",
]
