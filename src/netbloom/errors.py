"""Exception hierarchy for netbloom.

Argument and configuration errors also subclass ValueError so callers
that already catch ValueError keep working. Store failures are always
chained to the client exception that caused them.
"""
from __future__ import annotations


class NetBloomError(Exception):
    """Base exception for all netbloom errors."""


class ConfigurationError(NetBloomError, ValueError):
    """Raised when a filter or store is configured with invalid values."""


class InvalidArgument(NetBloomError, ValueError):
    """Raised when a hash or sizing function gets an out-of-range argument."""


class BatchTooLarge(NetBloomError, ValueError):
    """Raised when add() receives more items than the insertion batch limit."""

    def __init__(self, size: int, limit: int) -> None:
        super().__init__(
            f"batch of {size} items exceeds insertion limit of {limit}; split it"
        )
        self.size = size
        self.limit = limit


class StoreError(NetBloomError):
    """Raised when the bit store fails to complete a request."""


class StoreUnavailable(StoreError):
    """Raised when the bit store cannot be reached or times out."""
