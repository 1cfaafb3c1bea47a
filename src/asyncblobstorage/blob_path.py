from dataclasses import dataclass

from .errors import InvalidResourceNameError

SEPARATOR = "/"


def validate_container_name(container_name: str) -> str:
    """
    Reject empty or non-lowercase container names.
    Called by every backend before any lookup or request is made.
    """
    if not container_name or container_name != container_name.lower():
        raise InvalidResourceNameError(
            f"The specified resource name contains invalid characters: '{container_name}'."
        )
    return container_name


def validate_blob_name(blob_name: str) -> str:
    """
    Reject empty blob names. Prefixes may have one; blobs may not.
    Called by every backend before a blob is addressed.
    """
    if not blob_name:
        raise InvalidResourceNameError("The specified blob name is empty.")
    return blob_name


@dataclass(frozen=True)
class BlobPath:
    """Address of a blob: a container name and the blob name inside it."""

    container_name: str
    blob_name: str

    def __str__(self) -> str:
        return f"{self.container_name}{SEPARATOR}{self.blob_name}"

    @classmethod
    def parse(cls, value: "str | BlobPath") -> "BlobPath":
        """
        Parse "container/name" into a BlobPath, splitting at the first separator only.
        BlobPath values are returned as they are.
        """
        if isinstance(value, BlobPath):
            return value
        container_name, separator, blob_name = value.partition(SEPARATOR)
        if not separator:
            raise InvalidResourceNameError(
                f"Blob path '{value}' must contain a '{SEPARATOR}' between the container and blob names."
            )
        return cls(container_name, blob_name)
