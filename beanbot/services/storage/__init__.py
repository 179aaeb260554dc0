"""
Storage Services Package

Provides the content store interface, its GitHub and in-memory
implementations, and the ledger store that appends transactions to
yearly ledger files on top of them.
"""

from beanbot.services.storage.interface import (
    Blob,
    BlobNotFoundError,
    ConcurrentModification,
    ContentStoreError,
    ContentStoreInterface,
    CreateFailed,
    DecodeFailed,
    FetchFailed,
    LedgerStoreError,
    StorageError,
    VersionConflictError,
    WriteFailed,
)
from beanbot.services.storage.github import GitHubContentStore
from beanbot.services.storage.memory import InMemoryContentStore
from beanbot.services.storage.ledger import LedgerStore, ledger_path

__all__ = [
    # Interfaces
    "Blob",
    "ContentStoreInterface",
    # Exceptions
    "BlobNotFoundError",
    "ConcurrentModification",
    "ContentStoreError",
    "CreateFailed",
    "DecodeFailed",
    "FetchFailed",
    "LedgerStoreError",
    "StorageError",
    "VersionConflictError",
    "WriteFailed",
    # Implementations
    "GitHubContentStore",
    "InMemoryContentStore",
    "LedgerStore",
    "ledger_path",
]
