from collections.abc import Generator
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from ion_reconstruction.clients.configs import IonClientConfig
from ion_reconstruction.clients.ion_client import IonAPIClient
from ion_reconstruction.core.config import WorkflowConfig
from ion_reconstruction.models.asset_model import AssetCreationResponse, AssetMetadata


def make_response(status: int = 200, json_data: Any = None, text: str = "") -> MagicMock:
    """Build an object usable as ``async with session.get(...) as response``."""
    response = MagicMock()
    response.status = status
    response.json = AsyncMock(return_value=json_data)
    response.text = AsyncMock(return_value=text)

    context = MagicMock()
    context.__aenter__ = AsyncMock(return_value=response)
    context.__aexit__ = AsyncMock(return_value=False)
    return context


def asset_snapshot(asset_id: int, status: str, percent: float | None = None, name: str = "Test Script") -> AssetMetadata:
    data = {"id": asset_id, "name": name, "status": status}
    if percent is not None:
        data["percentComplete"] = percent
    return AssetMetadata.model_validate(data)


@pytest.fixture
def upload_location_data() -> dict[str, Any]:
    return {
        "endpoint": "https://s3.us-east-1.amazonaws.com",
        "bucket": "assets.ion.cesium.com",
        "prefix": "sources/12345/",
        "accessKey": "ASIA-TEST",
        "secretAccessKey": "secret-test",
        "sessionToken": "session-test",
    }


@pytest.fixture
def creation_data(upload_location_data: dict[str, Any]) -> dict[str, Any]:
    return {
        "assetMetadata": {
            "id": 12345,
            "type": "3DTILES",
            "name": "Test Script",
            "description": "",
            "status": "AWAITING_FILES",
        },
        "additionalAssets": [
            {"id": 12346, "type": "3DTILES", "name": "Test Script - Gaussian Splats"},
            {"id": 12347, "type": "3DTILES", "name": "Test Script - Point Cloud"},
        ],
        "uploadLocation": upload_location_data,
        "onComplete": {
            "method": "POST",
            "url": "https://api.ion.cesium.com/v1/assets/12345/uploadComplete",
            "fields": {"sourceType": "RASTER_IMAGERY", "token": "opaque"},
        },
    }


@pytest.fixture
def creation_response(creation_data: dict[str, Any]) -> AssetCreationResponse:
    return AssetCreationResponse.model_validate(creation_data)


@pytest.fixture
def client_config() -> IonClientConfig:
    return IonClientConfig(access_token="test-token", base_url="https://api.example.com")


@pytest.fixture
def ion_client(client_config: IonClientConfig) -> IonAPIClient:
    client = IonAPIClient(client_config)
    client.session = MagicMock()
    client.session.closed = False
    return client


@pytest.fixture
def input_file(tmp_path: Path) -> Generator[Path]:
    path = tmp_path / "images.zip"
    path.write_bytes(b"x" * 1000)
    yield path


@pytest.fixture
def workflow_config(input_file: Path) -> WorkflowConfig:
    return WorkflowConfig(access_token="test-token", input_path=input_file, api_base="https://api.example.com")
