"""
Abstract Content Store Interface

DESIGN DECISION: We define an abstract interface for the remote store
holding the ledger files. This allows us to:
1. Swap GitHub for another versioned blob store later
2. Use in-memory storage for testing
3. Keep the append protocol decoupled from HTTP details

The interface is intentionally tiny: fetch, create, and a conditional
write. Content crosses this boundary base64 encoded, exactly as the
remote transports it; decoding is the ledger store's job.
"""

from abc import ABC, abstractmethod
from typing import Optional

from pydantic import BaseModel, ConfigDict


class Blob(BaseModel):
    """A fetched blob: transport-encoded content plus its version tag."""

    model_config = ConfigDict(frozen=True)

    path: str
    content: str
    version: str


class ContentStoreInterface(ABC):
    """
    Abstract interface for a remote store of named, versioned text blobs.

    Any storage implementation (GitHub, in-memory, etc.)
    must implement these methods.
    """

    @abstractmethod
    def fetch_blob(self, path: str) -> Blob:
        """
        Fetch the blob at ``path``.

        Raises:
            BlobNotFoundError: If nothing is stored at ``path``
            ContentStoreError: For any other failure
        """
        pass

    @abstractmethod
    def create_blob(self, path: str, content: str) -> None:
        """
        Create a new blob at ``path``.

        Args:
            path: Blob path
            content: Base64 encoded content

        Raises:
            ContentStoreError: If creation fails
        """
        pass

    @abstractmethod
    def write_blob(self, path: str, content: str, expected_version: str) -> None:
        """
        Replace the blob at ``path`` if it is still at ``expected_version``.

        Args:
            path: Blob path
            content: Base64 encoded content
            expected_version: Version tag obtained by the last fetch

        Raises:
            VersionConflictError: If the blob moved past ``expected_version``
            ContentStoreError: For any other failure
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path

    @property
    def code(self) -> str:
        return type(self).__name__


# Content store level -------------------------------------------------------

class ContentStoreError(StorageError):
    """The remote store failed or could not be reached."""

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        status_code: Optional[int] = None,
    ):
        super().__init__(message, path)
        self.status_code = status_code


class BlobNotFoundError(StorageError):
    """Nothing is stored at the requested path."""
    pass


class VersionConflictError(StorageError):
    """A conditional write was rejected because the version tag is stale."""
    pass


# Ledger level --------------------------------------------------------------

class LedgerStoreError(StorageError):
    """Appending a transaction to its ledger file failed."""
    pass


class FetchFailed(LedgerStoreError):
    pass


class CreateFailed(LedgerStoreError):
    pass


class DecodeFailed(LedgerStoreError):
    pass


class ConcurrentModification(LedgerStoreError):
    """
    Another writer updated the ledger between our fetch and write.

    Not retried. Kept distinct from WriteFailed so a caller can decide
    to retry it.
    """

    def __init__(self, message: str, path: str, expected_version: str):
        super().__init__(message, path)
        self.expected_version = expected_version


class WriteFailed(LedgerStoreError):
    pass
