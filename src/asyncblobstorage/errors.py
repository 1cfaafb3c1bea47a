from enum import Enum


class ErrorKind(str, Enum):
    INVALID_RESOURCE_NAME = "InvalidResourceName"
    CONTAINER_NOT_FOUND = "ContainerNotFound"
    BLOB_NOT_FOUND = "BlobNotFound"
    CONTAINER_ALREADY_EXISTS = "ContainerAlreadyExists"
    BLOB_ALREADY_EXISTS = "BlobAlreadyExists"


class BlobStorageError(Exception):
    """
    Base class for the closed set of storage errors.
    The kind is kept as structured data; the message is "<Kind>: <description>".
    """

    kind: ErrorKind
    default_description: str = "The storage operation failed."

    def __init__(self, description: str | None = None) -> None:
        self.description = description or self.default_description
        super().__init__(f"{self.kind.value}: {self.description}")


class InvalidResourceNameError(BlobStorageError):
    """Raised when a container name is empty or not lowercase."""

    kind = ErrorKind.INVALID_RESOURCE_NAME
    default_description = "The specified resource name contains invalid characters."


class ContainerNotFoundError(BlobStorageError):
    """Raised when a referenced container does not exist."""

    kind = ErrorKind.CONTAINER_NOT_FOUND
    default_description = "The specified container does not exist."


class BlobNotFoundError(BlobStorageError):
    """Raised when a referenced blob does not exist."""

    kind = ErrorKind.BLOB_NOT_FOUND
    default_description = "The specified blob does not exist."


class ContainerAlreadyExistsError(BlobStorageError):
    kind = ErrorKind.CONTAINER_ALREADY_EXISTS
    default_description = "The specified container already exists."


class BlobAlreadyExistsError(BlobStorageError):
    kind = ErrorKind.BLOB_ALREADY_EXISTS
    default_description = "The specified blob already exists."


ERRORS_BY_KIND: dict[ErrorKind, type[BlobStorageError]] = {
    error_type.kind: error_type
    for error_type in (
        InvalidResourceNameError,
        ContainerNotFoundError,
        BlobNotFoundError,
        ContainerAlreadyExistsError,
        BlobAlreadyExistsError,
    )
}
