"""
Custom exceptions for the flight network store.

Every error the store raises carries a taxonomy ``code`` so the request
layer can map it to a transport status without knowing the concrete class.
None of these are retryable: repeating the same call fails the same way.
"""

from typing import Optional


class FlightNetworkError(Exception):
    """Base exception for all flight network errors."""

    code: str = "error"


class InvalidArgumentError(FlightNetworkError):
    """Raised when an operation receives missing or malformed input."""

    code = "invalid-argument"

    def __init__(self, argument: str, message: str = "") -> None:
        self.argument = argument
        self.message = message or f"Invalid argument: {argument}"
        super().__init__(self.message)


class RecordNotFoundError(FlightNetworkError):
    """Raised when a referenced airline or airport does not exist."""

    code = "not-found"

    def __init__(self, kind: str, key: object, message: str = "") -> None:
        self.kind = kind
        self.key = key
        self.message = message or f"{kind.capitalize()} '{key}' not found"
        super().__init__(self.message)


class DuplicateRecordError(FlightNetworkError):
    """Raised when adding a record whose ID is already taken."""

    code = "conflict"

    def __init__(self, kind: str, record_id: int) -> None:
        self.kind = kind
        self.record_id = record_id
        self.message = f"{kind.capitalize()} with ID {record_id} already exists"
        super().__init__(self.message)


class UnknownReferenceError(FlightNetworkError):
    """Raised when a new route points at an airline or airport that does not exist."""

    code = "unknown-reference"

    def __init__(self, field: str, value: int, message: Optional[str] = None) -> None:
        self.field = field
        self.value = value
        self.message = message or f"Unknown {field}: {value}"
        super().__init__(self.message)
