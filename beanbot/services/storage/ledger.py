"""
Ledger Store

Appends a transaction to its yearly ledger file (``<year>.bean``) in a
remote content store:

1. Fetch the file; create it empty on first use, then fetch again
2. Decode the base64 transport encoding to UTF-8 text
3. Append ``"\\n" + ledger text``
4. Write it back, conditioned on the version tag from step 1

IMPORTANT: There is no retry loop. If another writer commits between
steps 1 and 4 the write is rejected and ConcurrentModification is
raised; the transaction is NOT saved. Callers must surface this.
"""

import base64
import binascii
from typing import Optional
from uuid import UUID

import structlog

from beanbot.audit import AuditLogger
from beanbot.models.transaction import Transaction
from beanbot.services.storage.interface import (
    Blob,
    BlobNotFoundError,
    ConcurrentModification,
    ContentStoreInterface,
    CreateFailed,
    DecodeFailed,
    FetchFailed,
    StorageError,
    VersionConflictError,
    WriteFailed,
)


logger = structlog.get_logger(__name__)

LEDGER_SUFFIX = ".bean"


def ledger_path(transaction: Transaction) -> str:
    """Ledger file a transaction belongs to, e.g. ``2021.bean``."""
    return f"{transaction.year()}{LEDGER_SUFFIX}"


def encode_content(text: str) -> str:
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


def decode_content(blob: Blob) -> str:
    """
    Decode a fetched blob to text.

    Line breaks inside the base64 payload are tolerated, as GitHub wraps
    its content at 60 characters.
    """
    payload = "".join(blob.content.split())
    try:
        return base64.b64decode(payload, validate=True).decode("utf-8")
    except (binascii.Error, ValueError) as e:
        # UnicodeDecodeError is a ValueError
        raise DecodeFailed(f"Could not decode {blob.path}: {e}", blob.path) from e


class LedgerStore:
    """
    Append-only writer for the yearly ledger files.

    Every failure is raised as a LedgerStoreError subclass; none are
    retried here.
    """

    def __init__(
        self,
        content_store: ContentStoreInterface,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._store = content_store
        self._audit_logger = audit_logger

    def append(
        self,
        transaction: Transaction,
        correlation_id: Optional[UUID] = None,
    ) -> str:
        """
        Append a transaction to its ledger file.

        Returns:
            Confirmation text to show the user

        Raises:
            FetchFailed, CreateFailed, DecodeFailed,
            ConcurrentModification, WriteFailed
        """
        path = ledger_path(transaction)
        blob = self._fetch_or_create(path, correlation_id)
        content = decode_content(blob) + "\n" + transaction.to_ledger_text()

        try:
            self._store.write_blob(path, encode_content(content), blob.version)
        except VersionConflictError as e:
            logger.warning(
                "ledger_concurrent_modification",
                path=path,
                expected_version=blob.version,
            )
            raise ConcurrentModification(
                f"{path} was changed by another writer; transaction not saved",
                path,
                blob.version,
            ) from e
        except StorageError as e:
            raise WriteFailed(f"Failed to write {path}: {e}", path) from e

        logger.info("ledger_appended", path=path, version=blob.version)
        return transaction.to_confirmation_text()

    def _fetch_or_create(self, path: str, correlation_id: Optional[UUID]) -> Blob:
        try:
            return self._store.fetch_blob(path)
        except BlobNotFoundError:
            logger.info("ledger_missing", path=path)
        except StorageError as e:
            raise FetchFailed(f"Failed to fetch {path}: {e}", path) from e

        try:
            self._store.create_blob(path, encode_content(""))
        except StorageError as e:
            raise CreateFailed(f"Failed to create {path}: {e}", path) from e

        if self._audit_logger:
            self._audit_logger.log_ledger_created(path=path, correlation_id=correlation_id)

        try:
            return self._store.fetch_blob(path)
        except StorageError as e:
            raise FetchFailed(f"Failed to fetch {path} after creating it: {e}", path) from e
