# cosdata/exceptions.py
"""
Error taxonomy for the cosdata client.

Errors are grouped by the operation that raised them, not by HTTP status.
Every error coming from the server carries the raw response body in
``details`` so failures can be diagnosed without re-running the call.

Hierarchy:
    CosdataError
    ├── APIError
    │   ├── AuthenticationError
    │   ├── CollectionCreationError
    │   ├── CollectionFetchError
    │   ├── IndexCreationError
    │   ├── TransactionError
    │   │   ├── TransactionCreationError
    │   │   ├── UpsertError
    │   │   ├── CommitError
    │   │   └── AbortError
    │   ├── QueryError
    │   └── FetchError
    └── IllegalStateError
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


class CosdataError(Exception):
    """Base error for everything raised by this package."""

    pass


@dataclass(eq=False)
class APIError(CosdataError):
    """
    Structured error for a failed API call.

    Attributes:
        message: Human-readable error message
        status_code: HTTP status code (None for transport failures)
        endpoint: Request path that failed
        details: Raw response body, or the transport error text
    """

    message: str
    status_code: Optional[int] = None
    endpoint: Optional[str] = None
    details: Optional[str] = None

    def __str__(self) -> str:
        parts = [self.message]

        if self.status_code:
            parts.append(f"(HTTP {self.status_code})")

        if self.details:
            parts.append(f"- {self.details}")

        return " ".join(parts)


class AuthenticationError(APIError):
    """Raised when the login call is rejected."""

    pass


class CollectionCreationError(APIError):
    """Raised when a collection cannot be created."""

    pass


class CollectionFetchError(APIError):
    """Raised when collection metadata cannot be read or listed."""

    pass


class IndexCreationError(APIError):
    """Raised when an index cannot be created."""

    pass


class TransactionError(APIError):
    """Base for failures of transaction endpoints."""

    pass


class TransactionCreationError(TransactionError):
    pass


class UpsertError(TransactionError):
    pass


class CommitError(TransactionError):
    pass


class AbortError(TransactionError):
    pass


class QueryError(APIError):
    """Raised when a similarity search fails."""

    pass


class FetchError(APIError):
    """Raised when a vector lookup fails (including unknown ids)."""

    pass


class IllegalStateError(CosdataError):
    """Raised when a transaction is used outside its valid state."""

    pass
