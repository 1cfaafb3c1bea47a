import logging
import threading
from dataclasses import dataclass, field
from pathlib import Path

from .blob_path import BlobPath, validate_blob_name, validate_container_name
from .errors import BlobNotFoundError, ContainerNotFoundError
from .navigation import BlobStorageContainer
from .storage_protocols import (
    DEFAULT_CONTENT_TYPE,
    AsyncBlobStorage,
    ContainerAccessPolicy,
)

logger = logging.getLogger(__name__)


@dataclass
class _InMemoryBlob:
    contents: bytes = b""
    content_type: str = DEFAULT_CONTENT_TYPE


@dataclass
class _InMemoryContainer:
    name: str
    access_policy: ContainerAccessPolicy = ContainerAccessPolicy.PRIVATE
    blobs: dict[str, _InMemoryBlob] = field(default_factory=dict)


class InMemoryBlobStorage(AsyncBlobStorage):
    """
    Blob storage kept in process memory.

    Behaves like AzureBlobStorage for every operation, so it can stand in
    for it in tests. Insertions and deletions are guarded by a lock; content
    replacement swaps a whole bytes object and needs none.
    """

    def __init__(self, url: str = "https://fake.storage.com/") -> None:
        self._url = url if url.endswith("/") else url + "/"
        self._containers: dict[str, _InMemoryContainer] = {}
        self._lock = threading.Lock()

    @staticmethod
    def _parse(blob_path: str | BlobPath) -> BlobPath:
        blob_path = BlobPath.parse(blob_path)
        validate_container_name(blob_path.container_name)
        validate_blob_name(blob_path.blob_name)
        return blob_path

    def _get_container(self, container_name: str) -> _InMemoryContainer:
        validate_container_name(container_name)
        container = self._containers.get(container_name)
        if container is None:
            raise ContainerNotFoundError()
        return container

    def _get_blob(self, blob_path: BlobPath) -> _InMemoryBlob:
        container = self._get_container(blob_path.container_name)
        blob = container.blobs.get(blob_path.blob_name)
        if blob is None:
            raise BlobNotFoundError()
        return blob

    def _write(self, blob_path: BlobPath, data: bytes, content_type: str | None) -> None:
        container = self._get_container(blob_path.container_name)
        with self._lock:
            container.blobs[blob_path.blob_name] = _InMemoryBlob(
                contents=bytes(data),
                content_type=content_type or DEFAULT_CONTENT_TYPE,
            )

    def get_url(self, *, sas_token: bool = True) -> str:
        return self._url

    def get_container_url(self, container_name: str, *, sas_token: bool = True) -> str:
        return f"{self._url}{validate_container_name(container_name)}"

    def get_blob_url(self, blob_path: str | BlobPath, *, sas_token: bool = True) -> str:
        blob_path = self._parse(blob_path)
        return f"{self.get_container_url(blob_path.container_name)}/{blob_path.blob_name}"

    async def create_container(
        self,
        container_name: str,
        *,
        access_policy: ContainerAccessPolicy | None = None,
    ) -> bool:
        validate_container_name(container_name)
        with self._lock:
            if container_name in self._containers:
                return False
            self._containers[container_name] = _InMemoryContainer(
                name=container_name,
                access_policy=ContainerAccessPolicy(access_policy or ContainerAccessPolicy.PRIVATE),
            )
        logger.debug("Created container '%s'", container_name)
        return True

    async def container_exists(self, container_name: str) -> bool:
        try:
            self._get_container(container_name)
        except ContainerNotFoundError:
            return False
        return True

    async def get_container_access_policy(self, container_name: str) -> ContainerAccessPolicy:
        return self._get_container(container_name).access_policy

    async def set_container_access_policy(
        self, container_name: str, policy: ContainerAccessPolicy
    ) -> None:
        self._get_container(container_name).access_policy = ContainerAccessPolicy(policy)

    async def delete_container(self, container_name: str) -> bool:
        validate_container_name(container_name)
        with self._lock:
            if self._containers.pop(container_name, None) is None:
                return False
        logger.debug("Deleted container '%s'", container_name)
        return True

    async def list_containers(self) -> list[BlobStorageContainer]:
        return [self.get_container(name) for name in sorted(self._containers)]

    async def create_blob(
        self, blob_path: str | BlobPath, *, content_type: str | None = None
    ) -> bool:
        blob_path = self._parse(blob_path)
        container = self._get_container(blob_path.container_name)
        with self._lock:
            if blob_path.blob_name in container.blobs:
                return False
            container.blobs[blob_path.blob_name] = _InMemoryBlob(
                content_type=content_type or DEFAULT_CONTENT_TYPE
            )
        logger.debug("Created blob '%s'", blob_path)
        return True

    async def blob_exists(self, blob_path: str | BlobPath) -> bool:
        blob_path = self._parse(blob_path)
        try:
            container = self._get_container(blob_path.container_name)
        except ContainerNotFoundError:
            return False
        return blob_path.blob_name in container.blobs

    async def get_blob_contents(self, blob_path: str | BlobPath) -> bytes:
        return self._get_blob(self._parse(blob_path)).contents

    async def get_blob_contents_as_string(self, blob_path: str | BlobPath) -> str:
        return self._get_blob(self._parse(blob_path)).contents.decode("utf-8")

    async def set_blob_contents(
        self,
        blob_path: str | BlobPath,
        data: bytes,
        *,
        content_type: str | None = None,
    ) -> None:
        self._write(self._parse(blob_path), data, content_type)

    async def set_blob_contents_from_string(
        self,
        blob_path: str | BlobPath,
        blob_contents: str,
        *,
        content_type: str | None = None,
    ) -> None:
        self._write(self._parse(blob_path), blob_contents.encode("utf-8"), content_type)

    async def set_blob_contents_from_file(
        self,
        blob_path: str | BlobPath,
        file_path: str,
        *,
        content_type: str | None = None,
    ) -> None:
        blob_path = self._parse(blob_path)
        self._get_container(blob_path.container_name)
        self._write(blob_path, Path(file_path).read_bytes(), content_type)

    async def get_blob_content_type(self, blob_path: str | BlobPath) -> str | None:
        return self._get_blob(self._parse(blob_path)).content_type

    async def set_blob_content_type(self, blob_path: str | BlobPath, content_type: str) -> None:
        self._get_blob(self._parse(blob_path)).content_type = content_type

    async def delete_blob(self, blob_path: str | BlobPath) -> bool:
        blob_path = self._parse(blob_path)
        container = self._get_container(blob_path.container_name)
        with self._lock:
            if container.blobs.pop(blob_path.blob_name, None) is None:
                return False
        logger.debug("Deleted blob '%s'", blob_path)
        return True

    async def list_blob_names(self, container_name: str, prefix: str = "") -> list[str]:
        container = self._get_container(container_name)
        return sorted(name for name in list(container.blobs) if name.startswith(prefix))

    async def close(self) -> None:
        pass
