"""Services package."""

from beanbot.services.storage import (
    ConcurrentModification,
    ContentStoreInterface,
    GitHubContentStore,
    InMemoryContentStore,
    LedgerStore,
    LedgerStoreError,
    StorageError,
)

__all__ = [
    # Storage services
    "ConcurrentModification",
    "ContentStoreInterface",
    "GitHubContentStore",
    "InMemoryContentStore",
    "LedgerStore",
    "LedgerStoreError",
    "StorageError",
]
