import logging
import os
from contextlib import contextmanager
from typing import Any, Iterator
from urllib.parse import urlsplit, urlunsplit

from azure.core.exceptions import HttpResponseError, ResourceNotFoundError
from azure.storage.blob import BlobProperties, ContentSettings
from azure.storage.blob.aio import BlobClient, BlobServiceClient, ContainerClient

from .blob_path import BlobPath, validate_blob_name, validate_container_name
from .errors import (
    ERRORS_BY_KIND,
    BlobAlreadyExistsError,
    BlobNotFoundError,
    ContainerAlreadyExistsError,
    ContainerNotFoundError,
    ErrorKind,
)
from .navigation import BlobStorageContainer
from .storage_protocols import (
    DEFAULT_CONTENT_TYPE,
    AsyncBlobStorage,
    ContainerAccessPolicy,
)

logger = logging.getLogger(__name__)

CONNECTION_STRING_VARIABLE = "AZURE_STORAGE_CONNECTION_STRING"


def _error_kind(error: HttpResponseError) -> ErrorKind | None:
    code = getattr(error, "error_code", None)
    code = getattr(code, "value", code)
    try:
        return ErrorKind(code)
    except ValueError:
        return None


@contextmanager
def _translate_errors(expected_statuses: tuple[int, ...] = ()) -> Iterator[None]:
    """
    Re-raise Azure errors that belong to the storage error taxonomy as BlobStorageErrors.
    Anything else (auth, throttling, transport) propagates unchanged, with a
    warning unless its status is one the caller handles.
    """
    try:
        yield
    except HttpResponseError as e:
        kind = _error_kind(e)
        if kind is None:
            if getattr(e, "status_code", None) in expected_statuses:
                raise
            logger.warning(
                "Unhandled Azure storage error (status=%s, code=%s)",
                getattr(e, "status_code", None),
                getattr(e, "error_code", None),
            )
            raise
        raise ERRORS_BY_KIND[kind]() from e


def get_azure_public_access(policy: ContainerAccessPolicy | None) -> str | None:
    """Azure expresses a private container as the absence of a public access level."""
    if policy is None:
        return None
    policy = ContainerAccessPolicy(policy)
    return None if policy == ContainerAccessPolicy.PRIVATE else policy.value


def _normalize_url(url: str, sas_token: bool) -> str:
    scheme, netloc, path, query, fragment = urlsplit(url)
    path = path.replace("%2F", "/").replace("%2f", "/")
    if not sas_token:
        query = ""
    return urlunsplit((scheme, netloc, path, query, fragment))


class AzureBlobStorage(AsyncBlobStorage):
    """Blob storage backed by Azure Blob Storage."""

    def __init__(self, blob_service_client: BlobServiceClient):
        """
        Create a storage from an existing BlobServiceClient.
        This allows custom authentication and configuration.
        """
        self._client = blob_service_client

    @classmethod
    def from_connection_string(cls, connection_string: str) -> "AzureBlobStorage":
        client = BlobServiceClient.from_connection_string(connection_string)
        return cls(client)

    @classmethod
    def from_account_url(cls, account_url: str, credential: Any = None) -> "AzureBlobStorage":
        """
        Create a storage from an account URL. A SAS token may be carried in the
        URL's query string, in which case no credential is needed.
        """
        return cls(BlobServiceClient(account_url=account_url, credential=credential))

    @classmethod
    def from_environment(cls) -> "AzureBlobStorage":
        connection_string = os.environ.get(CONNECTION_STRING_VARIABLE)
        if not connection_string:
            raise ValueError(f"Set {CONNECTION_STRING_VARIABLE} to use Azure blob storage")
        return cls.from_connection_string(connection_string)

    def _container_client(self, container_name: str) -> ContainerClient:
        return self._client.get_container_client(validate_container_name(container_name))

    def _blob_client(self, blob_path: BlobPath) -> BlobClient:
        container_client = self._container_client(blob_path.container_name)
        return container_client.get_blob_client(validate_blob_name(blob_path.blob_name))

    def get_url(self, *, sas_token: bool = True) -> str:
        return _normalize_url(self._client.url, sas_token)

    def get_container_url(self, container_name: str, *, sas_token: bool = True) -> str:
        return _normalize_url(self._container_client(container_name).url, sas_token)

    def get_blob_url(self, blob_path: str | BlobPath, *, sas_token: bool = True) -> str:
        blob_path = BlobPath.parse(blob_path)
        return _normalize_url(self._blob_client(blob_path).url, sas_token)

    async def create_container(
        self,
        container_name: str,
        *,
        access_policy: ContainerAccessPolicy | None = None,
    ) -> bool:
        container_client = self._container_client(container_name)
        try:
            with _translate_errors():
                await container_client.create_container(
                    public_access=get_azure_public_access(access_policy)
                )
        except ContainerAlreadyExistsError:
            return False
        logger.debug("Created container '%s'", container_name)
        return True

    async def container_exists(self, container_name: str) -> bool:
        container_client = self._container_client(container_name)
        try:
            await container_client.get_container_properties()
        except ResourceNotFoundError:
            return False
        return True

    async def get_container_access_policy(self, container_name: str) -> ContainerAccessPolicy:
        container_client = self._container_client(container_name)
        with _translate_errors():
            response = await container_client.get_container_access_policy()
        return ContainerAccessPolicy(response.get("public_access") or ContainerAccessPolicy.PRIVATE)

    async def set_container_access_policy(
        self, container_name: str, policy: ContainerAccessPolicy
    ) -> None:
        container_client = self._container_client(container_name)
        with _translate_errors():
            # Stored access policies are replaced by this call, so carry the current ones over.
            current = await container_client.get_container_access_policy()
            signed_identifiers = {
                identifier.id: identifier.access_policy
                for identifier in current.get("signed_identifiers") or []
            }
            await container_client.set_container_access_policy(
                signed_identifiers, public_access=get_azure_public_access(policy)
            )

    async def delete_container(self, container_name: str) -> bool:
        container_client = self._container_client(container_name)
        try:
            await container_client.delete_container()
        except ResourceNotFoundError:
            return False
        logger.debug("Deleted container '%s'", container_name)
        return True

    async def list_containers(self) -> list[BlobStorageContainer]:
        containers: list[BlobStorageContainer] = []
        pages = self._client.list_containers().by_page()
        async for page in pages:
            async for item in page:
                containers.append(self.get_container(item.name))
            logger.debug(
                "Listed %d containers, continuation=%s", len(containers), pages.continuation_token
            )
        return containers

    async def create_blob(
        self, blob_path: str | BlobPath, *, content_type: str | None = None
    ) -> bool:
        blob_path = BlobPath.parse(blob_path)
        blob_client = self._blob_client(blob_path)
        try:
            with _translate_errors(expected_statuses=(412,)):
                # overwrite=False sends If-None-Match: *
                await blob_client.upload_blob(
                    b"",
                    length=0,
                    overwrite=False,
                    content_settings=ContentSettings(
                        content_type=content_type or DEFAULT_CONTENT_TYPE
                    ),
                )
        except BlobAlreadyExistsError:
            return False
        except HttpResponseError as e:
            # Some service versions answer If-None-Match: * with 412 ConditionNotMet.
            if getattr(e, "status_code", None) != 412:
                raise
            return False
        logger.debug("Created blob '%s'", blob_path)
        return True

    async def blob_exists(self, blob_path: str | BlobPath) -> bool:
        blob_path = BlobPath.parse(blob_path)
        blob_client = self._blob_client(blob_path)
        try:
            await blob_client.get_blob_properties()
        except ResourceNotFoundError:
            return False
        return True

    async def get_blob_contents(self, blob_path: str | BlobPath) -> bytes:
        blob_path = BlobPath.parse(blob_path)
        blob_client = self._blob_client(blob_path)
        with _translate_errors():
            stream = await blob_client.download_blob()
            return await stream.readall()

    async def get_blob_contents_as_string(self, blob_path: str | BlobPath) -> str:
        data = await self.get_blob_contents(blob_path)
        return data.decode("utf-8")

    async def set_blob_contents(
        self,
        blob_path: str | BlobPath,
        data: bytes,
        *,
        content_type: str | None = None,
    ) -> None:
        blob_path = BlobPath.parse(blob_path)
        blob_client = self._blob_client(blob_path)
        with _translate_errors():
            await blob_client.upload_blob(
                data,
                length=len(data),
                overwrite=True,
                content_settings=ContentSettings(content_type=content_type or DEFAULT_CONTENT_TYPE),
            )

    async def set_blob_contents_from_string(
        self,
        blob_path: str | BlobPath,
        blob_contents: str,
        *,
        content_type: str | None = None,
    ) -> None:
        await self.set_blob_contents(
            blob_path, blob_contents.encode("utf-8"), content_type=content_type
        )

    async def set_blob_contents_from_file(
        self,
        blob_path: str | BlobPath,
        file_path: str,
        *,
        content_type: str | None = None,
    ) -> None:
        blob_path = BlobPath.parse(blob_path)
        blob_client = self._blob_client(blob_path)
        length = os.stat(file_path).st_size
        with open(file_path, "rb") as stream:
            with _translate_errors():
                await blob_client.upload_blob(
                    stream,
                    length=length,
                    overwrite=True,
                    content_settings=ContentSettings(
                        content_type=content_type or DEFAULT_CONTENT_TYPE
                    ),
                )
        logger.debug("Uploaded %d bytes from '%s' to '%s'", length, file_path, blob_path)

    async def _get_blob_properties(self, blob_path: BlobPath) -> BlobProperties:
        try:
            return await self._blob_client(blob_path).get_blob_properties()
        except ResourceNotFoundError:
            # HEAD responses carry no error body, so ask about the container directly.
            if not await self.container_exists(blob_path.container_name):
                raise ContainerNotFoundError()
            raise BlobNotFoundError()

    async def get_blob_content_type(self, blob_path: str | BlobPath) -> str | None:
        properties = await self._get_blob_properties(BlobPath.parse(blob_path))
        return properties.content_settings.content_type

    async def set_blob_content_type(self, blob_path: str | BlobPath, content_type: str) -> None:
        blob_path = BlobPath.parse(blob_path)
        # set_http_headers replaces every header, so start from the current ones.
        properties = await self._get_blob_properties(blob_path)
        content_settings = properties.content_settings
        content_settings.content_type = content_type
        with _translate_errors():
            await self._blob_client(blob_path).set_http_headers(content_settings=content_settings)

    async def delete_blob(self, blob_path: str | BlobPath) -> bool:
        blob_path = BlobPath.parse(blob_path)
        blob_client = self._blob_client(blob_path)
        try:
            with _translate_errors():
                await blob_client.delete_blob()
        except BlobNotFoundError:
            return False
        logger.debug("Deleted blob '%s'", blob_path)
        return True

    async def list_blob_names(self, container_name: str, prefix: str = "") -> list[str]:
        container_client = self._container_client(container_name)
        names: list[str] = []
        with _translate_errors():
            async for blob in container_client.list_blobs(name_starts_with=prefix):
                names.append(blob.name)
        return names

    async def close(self) -> None:
        await self._client.close()
