"""
Custom exceptions for the message store.
"""

from typing import Any, Optional


class MessageStoreError(Exception):
    """Base exception for message_store."""

    def __init__(self, message: str, details: Optional[Any] = None):
        self.message = message
        self.details = details
        super().__init__(message)


class NotFoundError(MessageStoreError):
    """Resource not found."""

    pass


class ValidationError(MessageStoreError):
    """Validation error (malformed or missing input)."""

    pass


class InfrastructureError(MessageStoreError):
    """Infrastructure-related error (DB unreachable, rejected statement, etc.)."""

    pass
