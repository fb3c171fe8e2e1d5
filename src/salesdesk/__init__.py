"""salesdesk: filterable, paginated sales-records browser."""

__version__ = "0.1.0"
