"""Custom exceptions for Shelf Access."""


class ShelfAccessError(Exception):
    """Base class for errors raised by Shelf Access adapters."""


class GatewayError(ShelfAccessError):
    """Raised when the credential provider rejects or fails an operation."""

    def __init__(self, operation: str, message: str) -> None:
        self.operation = operation
        self.message = message
        super().__init__(message)


class StoreError(ShelfAccessError):
    """Raised when the directory store fails a query, update or procedure call."""

    def __init__(self, operation: str, message: str) -> None:
        self.operation = operation
        self.message = message
        super().__init__(f"{operation} failed: {message}")
