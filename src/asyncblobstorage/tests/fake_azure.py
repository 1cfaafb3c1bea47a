"""
In-process stand-in for azure.storage.blob.aio.BlobServiceClient.

Raises the same azure-core exception types, status codes and error codes as
the service, including HEAD-style 404s that carry no error code.
"""

import asyncio
from dataclasses import dataclass, field
from types import SimpleNamespace
from urllib.parse import quote

from azure.core.exceptions import (
    HttpResponseError,
    ResourceExistsError,
    ResourceNotFoundError,
)
from azure.storage.blob import ContentSettings


def storage_error(
    error_type: type[HttpResponseError], status_code: int, error_code: str | None = None
) -> HttpResponseError:
    error = error_type(message=error_code or f"Status {status_code}")
    error.status_code = status_code
    error.error_code = error_code
    return error


@dataclass
class _FakeBlob:
    data: bytes
    content_settings: ContentSettings


@dataclass
class _FakeContainer:
    public_access: str | None = None
    signed_identifiers: list = field(default_factory=list)
    blobs: dict[str, _FakeBlob] = field(default_factory=dict)


class FakeBlobServiceClient:
    def __init__(
        self,
        account_url: str = "https://fakeaccount.blob.core.windows.net/",
        sas: str = "sv=2021-08-06&sig=secret",
        page_size: int = 2,
    ) -> None:
        self.account_url = account_url
        self.sas = sas
        self.page_size = page_size
        self.containers: dict[str, _FakeContainer] = {}
        self.calls: list[tuple[str, dict]] = []
        self.failures: dict[str, Exception] = {}
        self.hang_on: set[str] = set()
        self.in_flight = asyncio.Event()
        self.page_requests = 0
        self.closed = False

    @property
    def url(self) -> str:
        return f"{self.account_url}?{self.sas}"

    async def _request(self, operation: str, **kwargs) -> None:
        self.calls.append((operation, kwargs))
        if operation in self.failures:
            raise self.failures[operation]
        if operation in self.hang_on:
            self.in_flight.set()
            await asyncio.Event().wait()

    def get_container_client(self, container: str) -> "FakeContainerClient":
        return FakeContainerClient(self, container)

    def list_containers(self) -> SimpleNamespace:
        return SimpleNamespace(by_page=lambda: _FakePages(self))

    async def close(self) -> None:
        self.closed = True


async def _iterate(items):
    for item in items:
        yield item


class _FakePages:
    """Mimics AsyncPageIterator: one request per page, driven by a continuation token."""

    def __init__(self, service: FakeBlobServiceClient) -> None:
        self._service = service
        self.continuation_token: str | None = None
        self._started = False

    def __aiter__(self) -> "_FakePages":
        return self

    async def __anext__(self):
        if self._started and self.continuation_token is None:
            raise StopAsyncIteration
        self._started = True
        await self._service._request("list_containers_segment", marker=self.continuation_token)
        self._service.page_requests += 1
        names = sorted(self._service.containers)
        start = int(self.continuation_token or 0)
        end = start + self._service.page_size
        self.continuation_token = str(end) if end < len(names) else None
        return _iterate([SimpleNamespace(name=name) for name in names[start:end]])


class FakeContainerClient:
    def __init__(self, service: FakeBlobServiceClient, container_name: str) -> None:
        self._service = service
        self.container_name = container_name

    @property
    def url(self) -> str:
        return f"{self._service.account_url}{quote(self.container_name)}?{self._service.sas}"

    def _container(self, error_code: str | None = "ContainerNotFound") -> _FakeContainer:
        container = self._service.containers.get(self.container_name)
        if container is None:
            raise storage_error(ResourceNotFoundError, 404, error_code)
        return container

    def get_blob_client(self, blob: str) -> "FakeBlobClient":
        if not blob:
            raise ValueError("Please specify a container name and blob name.")
        return FakeBlobClient(self._service, self.container_name, blob)

    async def create_container(self, public_access=None) -> None:
        await self._service._request("create_container", public_access=public_access)
        if self.container_name in self._service.containers:
            raise storage_error(ResourceExistsError, 409, "ContainerAlreadyExists")
        self._service.containers[self.container_name] = _FakeContainer(public_access=public_access)

    async def get_container_properties(self) -> SimpleNamespace:
        await self._service._request("get_container_properties")
        self._container(error_code=None)
        return SimpleNamespace(name=self.container_name)

    async def delete_container(self) -> None:
        await self._service._request("delete_container")
        self._container()
        del self._service.containers[self.container_name]

    async def get_container_access_policy(self) -> dict:
        await self._service._request("get_container_access_policy")
        container = self._container()
        return {
            "public_access": container.public_access,
            "signed_identifiers": list(container.signed_identifiers),
        }

    async def set_container_access_policy(self, signed_identifiers, public_access=None) -> None:
        await self._service._request(
            "set_container_access_policy",
            signed_identifiers=signed_identifiers,
            public_access=public_access,
        )
        container = self._container()
        container.public_access = public_access
        container.signed_identifiers = [
            SimpleNamespace(id=identifier, access_policy=policy)
            for identifier, policy in signed_identifiers.items()
        ]

    def list_blobs(self, name_starts_with: str | None = None):
        async def _list():
            await self._service._request("list_blobs", name_starts_with=name_starts_with)
            container = self._container()
            for name in sorted(container.blobs):
                if name.startswith(name_starts_with or ""):
                    yield SimpleNamespace(name=name)

        return _list()


class _FakeDownloader:
    def __init__(self, data: bytes) -> None:
        self._data = data

    async def readall(self) -> bytes:
        return self._data


class FakeBlobClient:
    def __init__(self, service: FakeBlobServiceClient, container_name: str, blob_name: str) -> None:
        self._service = service
        self.container_name = container_name
        self.blob_name = blob_name

    @property
    def url(self) -> str:
        # Older SDKs percent-encode "/" inside blob names.
        return (
            f"{self._service.account_url}{quote(self.container_name)}/"
            f"{quote(self.blob_name, safe='')}?{self._service.sas}"
        )

    def _container(self, error_code: str | None = "ContainerNotFound") -> _FakeContainer:
        container = self._service.containers.get(self.container_name)
        if container is None:
            raise storage_error(ResourceNotFoundError, 404, error_code)
        return container

    def _blob(self, error_code: str | None = "BlobNotFound") -> _FakeBlob:
        container = self._container("ContainerNotFound" if error_code else None)
        blob = container.blobs.get(self.blob_name)
        if blob is None:
            raise storage_error(ResourceNotFoundError, 404, error_code)
        return blob

    async def upload_blob(self, data, length=None, overwrite=False, content_settings=None) -> None:
        await self._service._request(
            "upload_blob", length=length, overwrite=overwrite, content_settings=content_settings
        )
        container = self._container()
        if hasattr(data, "read"):
            data = data.read()
        if not overwrite and self.blob_name in container.blobs:
            raise storage_error(ResourceExistsError, 409, "BlobAlreadyExists")
        container.blobs[self.blob_name] = _FakeBlob(
            data=bytes(data),
            content_settings=ContentSettings(
                content_type=(content_settings.content_type if content_settings else None)
                or "application/octet-stream"
            ),
        )

    async def download_blob(self) -> _FakeDownloader:
        await self._service._request("download_blob")
        return _FakeDownloader(self._blob().data)

    async def get_blob_properties(self) -> SimpleNamespace:
        await self._service._request("get_blob_properties")
        blob = self._blob(error_code=None)
        return SimpleNamespace(
            name=self.blob_name,
            size=len(blob.data),
            content_settings=ContentSettings(
                content_type=blob.content_settings.content_type,
                content_encoding=blob.content_settings.content_encoding,
            ),
        )

    async def set_http_headers(self, content_settings=None) -> None:
        await self._service._request("set_http_headers", content_settings=content_settings)
        self._blob().content_settings = content_settings

    async def delete_blob(self) -> None:
        await self._service._request("delete_blob")
        self._blob()
        del self._container().blobs[self.blob_name]
