"""Permission utilities: SQL, messages and storage error handling."""

from .error_handling import grant_storage_error_handler
from .messages import duplicate_grant_message

__all__ = [
    "grant_storage_error_handler",
    "duplicate_grant_message",
]
