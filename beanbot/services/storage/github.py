"""
GitHub Content Store

DESIGN DECISION: The yearly ledger files live in a GitHub repository
and are read and written through the REST contents API because:
1. The ledger stays a plain text file the user can edit and diff
2. Every append is a commit, so history comes for free
3. The blob sha doubles as the optimistic-concurrency version tag

TRADEOFFS:
- One HTTP round trip per fetch/create/write
- A write is rejected (409) if anyone committed to the file since our
  fetch; we surface that, we do not retry it
"""

from typing import Any, Optional

import httpx
import structlog

from beanbot.config import GitHubSettings, get_settings
from beanbot.services.storage.interface import (
    Blob,
    BlobNotFoundError,
    ContentStoreError,
    ContentStoreInterface,
    VersionConflictError,
)


logger = structlog.get_logger(__name__)

GITHUB_MEDIA_TYPE = "application/vnd.github+json"


class GitHubContentStore(ContentStoreInterface):
    """
    Contents API client for one repository.

    Requests are synchronous and bounded by ``timeout_seconds``.
    """

    def __init__(
        self,
        settings: Optional[GitHubSettings] = None,
        client: Optional[httpx.Client] = None,
    ):
        self._settings = settings or get_settings().github
        self._client = client or httpx.Client(
            base_url=self._settings.api_url,
            headers={
                "Accept": GITHUB_MEDIA_TYPE,
                "Authorization": f"Bearer {self._settings.token}",
                "X-GitHub-Api-Version": "2022-11-28",
            },
            timeout=httpx.Timeout(timeout=self._settings.timeout_seconds),
        )

    def _contents_url(self, path: str) -> str:
        return f"/repos/{self._settings.owner}/{self._settings.repo}/contents/{path}"

    def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            return self._client.request(method, self._contents_url(path), **kwargs)
        except httpx.HTTPError as e:
            raise ContentStoreError(f"{method} {path} failed: {e}", path) from e

    def fetch_blob(self, path: str) -> Blob:
        params = {"ref": self._settings.branch} if self._settings.branch else None
        response = self._request("GET", path, params=params)

        if response.status_code == 404:
            raise BlobNotFoundError(f"Not found: {path}", path)
        if response.status_code != 200:
            raise ContentStoreError(
                f"GET {path} returned {response.status_code}: {response.text}",
                path,
                status_code=response.status_code,
            )

        try:
            data = response.json()
            return Blob(path=path, content=data["content"], version=data["sha"])
        except (ValueError, KeyError, TypeError) as e:
            raise ContentStoreError(
                f"GET {path} returned an unexpected body: {e}",
                path,
                status_code=response.status_code,
            ) from e

    def create_blob(self, path: str, content: str) -> None:
        response = self._request("PUT", path, json=self._put_body(path, content))
        if response.status_code not in (200, 201):
            raise ContentStoreError(
                f"Creating {path} returned {response.status_code}: {response.text}",
                path,
                status_code=response.status_code,
            )
        logger.info("github_blob_created", path=path)

    def write_blob(self, path: str, content: str, expected_version: str) -> None:
        body = self._put_body(path, content)
        body["sha"] = expected_version
        response = self._request("PUT", path, json=body)

        if response.status_code == 409:
            raise VersionConflictError(
                f"{path} changed since version {expected_version}: {response.text}",
                path,
            )
        if response.status_code not in (200, 201):
            raise ContentStoreError(
                f"Writing {path} returned {response.status_code}: {response.text}",
                path,
                status_code=response.status_code,
            )
        logger.info("github_blob_written", path=path)

    def _put_body(self, path: str, content: str) -> dict[str, Any]:
        body: dict[str, Any] = {
            "message": self._settings.commit_message.format(path=path),
            "content": content,
        }
        if self._settings.branch:
            body["branch"] = self._settings.branch
        return body

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "GitHubContentStore":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
