import os
import uuid

import pytest
from dotenv import load_dotenv

from asyncblobstorage import AzureBlobStorage, InMemoryBlobStorage
from fake_azure import FakeBlobServiceClient

load_dotenv()

# Azure config
CONN_STR = os.environ.get("AZURE_CONN_STR")

TEST_CONTAINER_PREFIX = "test-"


def unique_container_name(suffix: str) -> str:
    return f"{TEST_CONTAINER_PREFIX}{suffix}-{uuid.uuid4().hex[:12]}"


def _delete_test_containers() -> None:
    from azure.storage.blob import BlobServiceClient

    blob_service_client = BlobServiceClient.from_connection_string(CONN_STR)
    for container in blob_service_client.list_containers(name_starts_with=TEST_CONTAINER_PREFIX):
        blob_service_client.delete_container(container.name)


@pytest.fixture
def container_name() -> str:
    return unique_container_name("container")


@pytest.fixture
def fake_service() -> FakeBlobServiceClient:
    return FakeBlobServiceClient()


@pytest.fixture
def azure_storage(fake_service) -> AzureBlobStorage:
    """AzureBlobStorage running over the in-process fake service client."""
    return AzureBlobStorage(fake_service)


# ---------------------------
# Parametrize backends
# ---------------------------
@pytest.fixture(
    params=[
        pytest.param("memory", marks=pytest.mark.memory),
        pytest.param("fake_azure", marks=pytest.mark.fake_azure),
        pytest.param("azure", marks=pytest.mark.azure),
    ]
)
def storage(request):
    """Fixture that provides every backend that should behave identically."""
    if request.param == "memory":
        yield InMemoryBlobStorage()

    elif request.param == "fake_azure":
        yield AzureBlobStorage(FakeBlobServiceClient())

    elif request.param == "azure":
        if not CONN_STR:
            pytest.skip("Azure backend not configured (AZURE_CONN_STR missing)")
        yield AzureBlobStorage.from_connection_string(CONN_STR)
        _delete_test_containers()
