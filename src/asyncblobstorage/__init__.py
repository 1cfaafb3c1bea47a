"""
asyncblobstorage
================

Async, backend-agnostic blob storage: containers, blobs and path prefixes,
backed by process memory or Azure Blob Storage.

Main entry points:
- AsyncBlobStorage: the storage protocol every backend implements
- InMemoryBlobStorage, AzureBlobStorage: storage backends
- BlobPath: "container/name" addressing
- BlobStorageContainer, BlobStoragePrefix, BlobStorageBlob: navigation handles
- BlobStorageError and its subclasses: the error taxonomy

Example:
    from asyncblobstorage import InMemoryBlobStorage

    async with InMemoryBlobStorage() as storage:
        container = storage.get_container("logs")
        await container.create()
        await container.set_blob_contents_from_string("2024/01.txt", "hello")
"""

from .blob_path import BlobPath, validate_blob_name, validate_container_name
from .errors import (
    BlobAlreadyExistsError,
    BlobNotFoundError,
    BlobStorageError,
    ContainerAlreadyExistsError,
    ContainerNotFoundError,
    ErrorKind,
    InvalidResourceNameError,
)
from .navigation import BlobStorageBlob, BlobStorageContainer, BlobStoragePrefix
from .storage_protocols import (
    DEFAULT_CONTENT_TYPE,
    AsyncBlobStorage,
    ContainerAccessPolicy,
)
from .in_memory import InMemoryBlobStorage
from .azure_blob_storage import AzureBlobStorage

import importlib.metadata

try:
    __version__ = importlib.metadata.version(__name__)
except importlib.metadata.PackageNotFoundError:
    __version__ = "0.0.0"

__all__ = [
    "BlobPath",
    "validate_container_name",
    "validate_blob_name",
    "ErrorKind",
    "BlobStorageError",
    "InvalidResourceNameError",
    "ContainerNotFoundError",
    "BlobNotFoundError",
    "ContainerAlreadyExistsError",
    "BlobAlreadyExistsError",
    "BlobStorageContainer",
    "BlobStoragePrefix",
    "BlobStorageBlob",
    "DEFAULT_CONTENT_TYPE",
    "AsyncBlobStorage",
    "ContainerAccessPolicy",
    "InMemoryBlobStorage",
    "AzureBlobStorage",
]
