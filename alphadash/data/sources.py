"""
Dataset sources: where the CSV table and model JSON are read from.

Every source exposes `read_text(name) -> str` and raises
`DatasetNotFoundError` for missing objects and `ProviderError` for
anything else that goes wrong while fetching.

- LocalFileSource(root): files under a local directory.
- BlobSource(container): objects in an Azure Blob Storage container.
- HttpSource(base_url): files served under an HTTP base URL.
"""

from __future__ import annotations

import time
from pathlib import Path
from typing import TYPE_CHECKING, Optional, Protocol

import requests
from azure.core.exceptions import AzureError, ResourceNotFoundError
from loguru import logger

from alphadash import APP_VERSION
from alphadash.core.exceptions import ConfigError, DatasetNotFoundError, ProviderError

if TYPE_CHECKING:
    from azure.storage.blob import ContainerClient  # pragma: no cover


class DataSource(Protocol):
    cacheable: bool

    def read_text(self, name: str) -> str: ...


class LocalFileSource:
    """Reads dataset files from a directory on the local filesystem."""

    cacheable = False

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root).resolve()

    def _resolve(self, name: str) -> Path:
        path = (self.root / name.lstrip("/")).resolve()
        if self.root not in path.parents:
            raise DatasetNotFoundError(f"{name} is outside of {self.root}")
        return path

    def read_text(self, name: str) -> str:
        path = self._resolve(name)
        if not path.is_file():
            raise DatasetNotFoundError(f"{name} not found under {self.root}")
        try:
            return path.read_text(encoding="utf-8")
        except OSError as exc:
            raise ProviderError(f"failed to read {path}: {exc}") from exc

    def __repr__(self) -> str:
        return f"LocalFileSource({str(self.root)!r})"


class BlobSource:
    """Reads dataset files from an Azure Blob Storage container."""

    cacheable = True

    def __init__(self, container: "ContainerClient") -> None:
        self.container = container

    @classmethod
    def from_settings(
        cls,
        *,
        container_name: Optional[str],
        connection_string: Optional[str] = None,
        account: Optional[str] = None,
        account_key: Optional[str] = None,
    ) -> "BlobSource":
        """
        Build a source using either:
        - a connection string, or
        - https://{account}.blob.core.windows.net with the account key
        """
        from azure.storage.blob import BlobServiceClient

        if not container_name:
            raise ConfigError("AZURE_STORAGE_CONTAINER_NAME is not configured")
        if connection_string:
            service = BlobServiceClient.from_connection_string(connection_string)
        elif account and account_key:
            service = BlobServiceClient(
                f"https://{account}.blob.core.windows.net", credential=account_key
            )
        else:
            raise ConfigError(
                "Azure storage not configured: set AZURE_STORAGE_CONNECTION_STRING "
                "or AZURE_STORAGE_ACCOUNT/AZURE_STORAGE_ACCOUNT_KEY"
            )
        return cls(service.get_container_client(container_name))

    def read_text(self, name: str) -> str:
        blob = self.container.get_blob_client(name.lstrip("/"))
        try:
            data = blob.download_blob().readall()
        except ResourceNotFoundError as exc:
            raise DatasetNotFoundError(f"blob {name} not found") from exc
        except AzureError as exc:
            raise ProviderError(f"failed to download blob {name}: {exc}") from exc
        return data.decode("utf-8")

    def __repr__(self) -> str:
        return f"BlobSource({getattr(self.container, 'container_name', '?')!r})"


class HttpSource:
    """Reads dataset files served under an HTTP base URL, with retries."""

    cacheable = False

    def __init__(
        self,
        base_url: str,
        *,
        session: Optional[requests.Session] = None,
        retries: int = 3,
        backoff: float = 0.5,
        timeout: tuple = (5, 15),
    ) -> None:
        if not base_url:
            raise ConfigError("DATA_BASE_URL is not configured")
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.session.headers.update({"User-Agent": f"alpha-dash/{APP_VERSION}"})
        self.retries = max(1, int(retries))
        self.backoff = backoff
        self.timeout = timeout

    def read_text(self, name: str) -> str:
        url = f"{self.base_url}/{name.lstrip('/')}"
        delay = self.backoff
        for attempt in range(1, self.retries + 1):
            try:
                response = self.session.get(url, timeout=self.timeout)
            except requests.RequestException as exc:
                logger.warning(
                    "[http-source] attempt={} url={} error={}", attempt, url, exc
                )
                if attempt == self.retries:
                    raise ProviderError(f"network failure fetching {url}") from exc
            else:
                if response.status_code == 404:
                    raise DatasetNotFoundError(f"{url} not found")
                if response.status_code < 500:
                    if response.status_code >= 400:
                        raise ProviderError(
                            f"HTTP {response.status_code} fetching {url}"
                        )
                    return response.text
                logger.warning(
                    "[http-source] attempt={} url={} status={}",
                    attempt,
                    url,
                    response.status_code,
                )
                if attempt == self.retries:
                    raise ProviderError(f"HTTP {response.status_code} fetching {url}")
            time.sleep(delay)
            delay = min(delay * 2, 2.0)
        raise ProviderError(f"failed to fetch {url}")

    def __repr__(self) -> str:
        return f"HttpSource({self.base_url!r})"


__all__ = [
    "DataSource",
    "LocalFileSource",
    "BlobSource",
    "HttpSource",
]
