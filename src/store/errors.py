"""
Durable Store Errors

Exceptions raised by the comment persistence bridge and the
participant service. The HTTP layer maps them to status codes.
"""

from typing import Dict, Optional


class ChatStoreError(Exception):
    """Base class for durable store errors."""


class ValidationError(ChatStoreError):
    """
    Raised when input is rejected before any durable write.

    Attributes:
        field_errors: Mapping of field name to a human-readable problem
    """

    def __init__(self, field_errors: Dict[str, str]):
        self.field_errors = dict(field_errors)
        details = ", ".join(
            f"{field}: {problem}" for field, problem in self.field_errors.items()
        )
        super().__init__(f"Invalid input ({details})")


class StorageFailure(ChatStoreError):
    """Raised when the durable store fails a read or write."""

    def __init__(self, message: str, operation: Optional[str] = None):
        super().__init__(message)
        self.operation = operation
