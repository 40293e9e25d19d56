"""Exceptions raised by the favorites cleanup job.

Only credential, connectivity and empty-authoritative-set failures abort a run.
``StoreError`` and ``DeletionError`` are raised by stores for a single record
and absorbed by the job into its statistics.
"""

from typing import Optional

__all__ = [
    "CleanupError",
    "InvalidCredentialError",
    "MalformedCredentialError",
    "StoreConnectionError",
    "EmptyAuthoritativeSetError",
    "StoreError",
    "NotFoundError",
    "DeletionError",
]


class CleanupError(Exception):
    """Base class for every error the job reports."""


class InvalidCredentialError(CleanupError):
    """Service account file is missing, unreadable or lacks a required field."""


class MalformedCredentialError(InvalidCredentialError):
    """Service account file is not a JSON object."""


class StoreConnectionError(CleanupError, ConnectionError):
    """The document store could not be reached or refused our credentials."""


class EmptyAuthoritativeSetError(CleanupError):
    """The bots collection came back empty."""

    def __init__(self, collection: str) -> None:
        super().__init__(
            f"No documents found in '{collection}'; refusing to continue "
            "(wrong project or misconfigured connection?)"
        )
        self.collection = collection


class StoreError(CleanupError):
    """A single store read failed."""


class NotFoundError(StoreError):
    """The requested collection does not exist."""


class DeletionError(StoreError):
    """A single document delete failed."""

    def __init__(self, path: str, cause: Optional[BaseException] = None) -> None:
        message = f"Failed to delete {path}"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)
        self.path = path
        self.cause = cause
