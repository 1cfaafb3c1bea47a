from dataclasses import dataclass
from typing import TYPE_CHECKING

from .blob_path import BlobPath

if TYPE_CHECKING:
    from .storage_protocols import AsyncBlobStorage, ContainerAccessPolicy


@dataclass(frozen=True)
class BlobStorageContainer:
    """Reference to a container within a storage backend."""

    storage: "AsyncBlobStorage"
    name: str

    def get_url(self, *, sas_token: bool = True) -> str:
        return self.storage.get_container_url(self.name, sas_token=sas_token)

    def get_blob(self, blob_name: str) -> "BlobStorageBlob":
        return self.storage.get_blob(BlobPath(self.name, blob_name))

    def get_prefix(self, path: str) -> "BlobStoragePrefix":
        return self.storage.get_prefix(BlobPath(self.name, path))

    async def create(self, *, access_policy: "ContainerAccessPolicy | None" = None) -> bool:
        """Create this container. Returns False when it already exists."""
        return await self.storage.create_container(self.name, access_policy=access_policy)

    async def exists(self) -> bool:
        return await self.storage.container_exists(self.name)

    async def get_access_policy(self) -> "ContainerAccessPolicy":
        return await self.storage.get_container_access_policy(self.name)

    async def set_access_policy(self, policy: "ContainerAccessPolicy") -> None:
        await self.storage.set_container_access_policy(self.name, policy)

    async def delete(self) -> bool:
        """Delete this container. Returns False when it did not exist."""
        return await self.storage.delete_container(self.name)

    async def create_blob(self, blob_name: str, *, content_type: str | None = None) -> bool:
        return await self.storage.create_blob(
            BlobPath(self.name, blob_name), content_type=content_type
        )

    async def blob_exists(self, blob_name: str) -> bool:
        return await self.storage.blob_exists(BlobPath(self.name, blob_name))

    async def get_blob_contents_as_string(self, blob_name: str) -> str:
        return await self.storage.get_blob_contents_as_string(BlobPath(self.name, blob_name))

    async def set_blob_contents_from_string(
        self, blob_name: str, blob_contents: str, *, content_type: str | None = None
    ) -> None:
        await self.storage.set_blob_contents_from_string(
            BlobPath(self.name, blob_name), blob_contents, content_type=content_type
        )

    async def delete_blob(self, blob_name: str) -> bool:
        return await self.storage.delete_blob(BlobPath(self.name, blob_name))

    async def list_blob_names(self, prefix: str = "") -> list[str]:
        return await self.storage.list_blob_names(self.name, prefix)


@dataclass(frozen=True)
class BlobStoragePrefix:
    """
    A container plus a path segment. Child names are formed by plain
    concatenation, so include a trailing "/" in the prefix when one is wanted.
    """

    storage: "AsyncBlobStorage"
    path: BlobPath

    def __post_init__(self) -> None:
        object.__setattr__(self, "path", BlobPath.parse(self.path))

    def _child(self, suffix: str) -> str:
        return self.path.blob_name + suffix

    def get_url(self, *, sas_token: bool = True) -> str:
        # A prefix at the container root has no blob name to address.
        if not self.path.blob_name:
            return self.get_container().get_url(sas_token=sas_token)
        return self.storage.get_blob_url(self.path, sas_token=sas_token)

    def get_container(self) -> BlobStorageContainer:
        return self.storage.get_container(self.path.container_name)

    def get_blob(self, blob_name: str) -> "BlobStorageBlob":
        return self.get_container().get_blob(self._child(blob_name))

    def get_prefix(self, path: str) -> "BlobStoragePrefix":
        return self.get_container().get_prefix(self._child(path))

    async def create_blob(self, blob_name: str, *, content_type: str | None = None) -> bool:
        return await self.get_container().create_blob(
            self._child(blob_name), content_type=content_type
        )

    async def blob_exists(self, blob_name: str) -> bool:
        return await self.get_container().blob_exists(self._child(blob_name))

    async def get_blob_contents_as_string(self, blob_name: str) -> str:
        return await self.get_container().get_blob_contents_as_string(self._child(blob_name))

    async def set_blob_contents_from_string(
        self, blob_name: str, blob_contents: str, *, content_type: str | None = None
    ) -> None:
        await self.get_container().set_blob_contents_from_string(
            self._child(blob_name), blob_contents, content_type=content_type
        )

    async def delete_blob(self, blob_name: str) -> bool:
        return await self.get_container().delete_blob(self._child(blob_name))

    async def list_blob_names(self) -> list[str]:
        """List the full names of blobs under this prefix."""
        return await self.get_container().list_blob_names(self.path.blob_name)


@dataclass(frozen=True)
class BlobStorageBlob:
    """Reference to a single blob within a storage backend."""

    storage: "AsyncBlobStorage"
    path: BlobPath

    def __post_init__(self) -> None:
        object.__setattr__(self, "path", BlobPath.parse(self.path))

    def get_url(self, *, sas_token: bool = True) -> str:
        return self.storage.get_blob_url(self.path, sas_token=sas_token)

    async def create(self, *, content_type: str | None = None) -> bool:
        """Create this blob empty. Returns False when it already exists."""
        return await self.storage.create_blob(self.path, content_type=content_type)

    async def exists(self) -> bool:
        return await self.storage.blob_exists(self.path)

    async def delete(self) -> bool:
        return await self.storage.delete_blob(self.path)

    async def get_contents(self) -> bytes:
        return await self.storage.get_blob_contents(self.path)

    async def get_contents_as_string(self) -> str:
        return await self.storage.get_blob_contents_as_string(self.path)

    async def set_contents(self, data: bytes, *, content_type: str | None = None) -> None:
        await self.storage.set_blob_contents(self.path, data, content_type=content_type)

    async def set_contents_from_string(
        self, blob_contents: str, *, content_type: str | None = None
    ) -> None:
        await self.storage.set_blob_contents_from_string(
            self.path, blob_contents, content_type=content_type
        )

    async def set_contents_from_file(
        self, file_path: str, *, content_type: str | None = None
    ) -> None:
        await self.storage.set_blob_contents_from_file(
            self.path, file_path, content_type=content_type
        )

    async def get_content_type(self) -> str | None:
        return await self.storage.get_blob_content_type(self.path)

    async def set_content_type(self, content_type: str) -> None:
        await self.storage.set_blob_content_type(self.path, content_type)
