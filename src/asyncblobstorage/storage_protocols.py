from enum import Enum
from typing import Protocol

from .blob_path import BlobPath
from .navigation import BlobStorageBlob, BlobStorageContainer, BlobStoragePrefix

DEFAULT_CONTENT_TYPE = "application/octet-stream"


class ContainerAccessPolicy(str, Enum):
    """
    Anonymous read access allowed for a container.
    BLOB exposes individual blobs only; CONTAINER also exposes listing and settings.
    """

    PRIVATE = "private"
    BLOB = "blob"
    CONTAINER = "container"

    @classmethod
    def _missing_(cls, value):
        # Long-form names: "blob-public", "container-public".
        if isinstance(value, str) and value.endswith("-public"):
            return {"blob": cls.BLOB, "container": cls.CONTAINER}.get(value[: -len("-public")])
        return None


class AsyncBlobStorage(Protocol):
    """
    Protocol for a blob storage backend.

    Backends subclass this explicitly to inherit the navigation helpers.
    Paths may be given as "container/name" strings or BlobPath values.
    """

    async def __aenter__(self) -> "AsyncBlobStorage":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    def get_container(self, container_name: str) -> BlobStorageContainer:
        """Return a handle to a container. Does not touch the backend."""
        return BlobStorageContainer(self, container_name)

    def get_blob(self, blob_path: str | BlobPath) -> BlobStorageBlob:
        """Return a handle to a blob. Does not touch the backend."""
        return BlobStorageBlob(self, blob_path)

    def get_prefix(self, prefix: str | BlobPath) -> BlobStoragePrefix:
        """Return a handle for blob operations relative to a path prefix."""
        return BlobStoragePrefix(self, prefix)

    def get_url(self, *, sas_token: bool = True) -> str:
        """URL of the storage account."""
        ...

    def get_container_url(self, container_name: str, *, sas_token: bool = True) -> str:
        ...

    def get_blob_url(self, blob_path: str | BlobPath, *, sas_token: bool = True) -> str:
        ...

    async def create_container(
        self,
        container_name: str,
        *,
        access_policy: ContainerAccessPolicy | None = None,
    ) -> bool:
        """Create a container. Returns False when it already exists."""
        ...

    async def container_exists(self, container_name: str) -> bool:
        ...

    async def get_container_access_policy(self, container_name: str) -> ContainerAccessPolicy:
        ...

    async def set_container_access_policy(
        self, container_name: str, policy: ContainerAccessPolicy
    ) -> None:
        ...

    async def delete_container(self, container_name: str) -> bool:
        """Delete a container and its blobs. Returns False when it did not exist."""
        ...

    async def list_containers(self) -> list[BlobStorageContainer]:
        """Return every container, following backend pagination to the end."""
        ...

    async def create_blob(
        self, blob_path: str | BlobPath, *, content_type: str | None = None
    ) -> bool:
        """Create an empty blob. Returns False, leaving content untouched, when it exists."""
        ...

    async def blob_exists(self, blob_path: str | BlobPath) -> bool:
        ...

    async def get_blob_contents(self, blob_path: str | BlobPath) -> bytes:
        """Download blob contents as bytes."""
        ...

    async def get_blob_contents_as_string(self, blob_path: str | BlobPath) -> str:
        """Download blob contents decoded as UTF-8."""
        ...

    async def set_blob_contents(
        self,
        blob_path: str | BlobPath,
        data: bytes,
        *,
        content_type: str | None = None,
    ) -> None:
        """Create or overwrite a blob with the given bytes."""
        ...

    async def set_blob_contents_from_string(
        self,
        blob_path: str | BlobPath,
        blob_contents: str,
        *,
        content_type: str | None = None,
    ) -> None:
        """Create or overwrite a blob with the UTF-8 encoding of blob_contents."""
        ...

    async def set_blob_contents_from_file(
        self,
        blob_path: str | BlobPath,
        file_path: str,
        *,
        content_type: str | None = None,
    ) -> None:
        """Upload a local file to a blob."""
        ...

    async def get_blob_content_type(self, blob_path: str | BlobPath) -> str | None:
        ...

    async def set_blob_content_type(self, blob_path: str | BlobPath, content_type: str) -> None:
        """Change the content type without touching the content."""
        ...

    async def delete_blob(self, blob_path: str | BlobPath) -> bool:
        """Delete a blob. Returns False when it did not exist."""
        ...

    async def list_blob_names(self, container_name: str, prefix: str = "") -> list[str]:
        """List blob names in a container that start with prefix."""
        ...

    async def close(self) -> None:
        """Close any resources/connections."""
        ...
