"""
In-memory content store.

Behaves like the GitHub contents API as far as the ledger store can
tell: base64 transport, git blob SHA-1 version tags, create fails on an
existing path, and conditional writes fail on a stale version.
"""

import base64
import binascii
import hashlib
from typing import Optional

from beanbot.services.storage.interface import (
    Blob,
    BlobNotFoundError,
    ContentStoreError,
    ContentStoreInterface,
    VersionConflictError,
)


def blob_version(data: bytes) -> str:
    """Git blob object id of ``data``."""
    header = f"blob {len(data)}\0".encode()
    return hashlib.sha1(header + data).hexdigest()


class InMemoryContentStore(ContentStoreInterface):
    """Dictionary-backed store for tests and local runs."""

    def __init__(self, blobs: Optional[dict[str, str]] = None):
        self._blobs: dict[str, bytes] = {}
        for path, text in (blobs or {}).items():
            self._blobs[path] = text.encode("utf-8")

    def fetch_blob(self, path: str) -> Blob:
        if path not in self._blobs:
            raise BlobNotFoundError(f"Not found: {path}", path)
        data = self._blobs[path]
        return Blob(
            path=path,
            content=base64.b64encode(data).decode("ascii"),
            version=blob_version(data),
        )

    def create_blob(self, path: str, content: str) -> None:
        if path in self._blobs:
            raise ContentStoreError(f"Already exists: {path}", path)
        self._blobs[path] = self._decode(path, content)

    def write_blob(self, path: str, content: str, expected_version: str) -> None:
        if path not in self._blobs:
            raise ContentStoreError(f"Not found: {path}", path)
        if blob_version(self._blobs[path]) != expected_version:
            raise VersionConflictError(
                f"{path} is at {blob_version(self._blobs[path])} but expected {expected_version}",
                path,
            )
        self._blobs[path] = self._decode(path, content)

    def read_text(self, path: str) -> str:
        """Current decoded content of ``path``."""
        return self._blobs[path].decode("utf-8")

    def put_text(self, path: str, text: str) -> None:
        """Unconditionally replace ``path``, as another writer would."""
        self._blobs[path] = text.encode("utf-8")

    def __contains__(self, path: str) -> bool:
        return path in self._blobs

    @staticmethod
    def _decode(path: str, content: str) -> bytes:
        try:
            return base64.b64decode(content, validate=True)
        except (binascii.Error, ValueError) as e:
            raise ContentStoreError(f"Content for {path} is not base64: {e}", path)
