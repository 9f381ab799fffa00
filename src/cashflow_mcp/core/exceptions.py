"""
Custom exceptions for the Cashflow MCP server.
"""


class CashflowError(Exception):
    """Base exception for Cashflow errors."""
    pass


class DatabaseNotFoundError(CashflowError):
    """Raised when the cashflow database file cannot be found."""
    pass


class DecodeError(CashflowError):
    """Raised when stored or imported data cannot be decoded."""
    pass


class NotFoundError(CashflowError):
    """Raised when a transaction, category or payment method does not exist."""
    pass


class DependencyError(CashflowError):
    """Raised when deleting a record that transactions still reference."""

    def __init__(self, kind: str, count: int):
        self.kind = kind
        self.count = count
        super().__init__(
            f"cannot delete {kind}: it is used in {count} transaction(s)"
        )


class InvalidTransactionError(CashflowError, ValueError):
    """Raised when a transaction payload fails validation before submission."""

    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message
        super().__init__(f"{field}: {message}")
