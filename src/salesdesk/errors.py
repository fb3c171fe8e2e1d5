"""Error taxonomy shared by the query, repository and HTTP layers."""


class SalesdeskError(Exception):
    """Base class for salesdesk errors."""


class ParameterValidationError(SalesdeskError):
    """A request parameter is malformed or out of range."""

    def __init__(self, field: str, message: str):
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message


class RecordNotFoundError(SalesdeskError):
    """No sale exists with the requested identifier."""

    def __init__(self, sale_id: int):
        super().__init__(f"Sale not found: {sale_id}")
        self.sale_id = sale_id


class StoreError(SalesdeskError):
    """The record store is unavailable or a query failed to execute."""


class StoreTimeoutError(StoreError):
    """A store read did not complete within the configured timeout."""
