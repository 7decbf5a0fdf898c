"""
Pydantic data models for the ion reconstruction upload workflow.

This module defines the request sent when creating an asset, the response the
service returns (upload location, completion callback and asset metadata), and
the results produced once every asset has reached a terminal status.
"""

from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


# Enums for controlled vocabularies

class AssetType(str, Enum):
    """Asset types understood by the tiling service."""
    TILES_3D = "3DTILES"
    GLTF = "GLTF"
    IMAGERY = "IMAGERY"
    TERRAIN = "TERRAIN"
    KML = "KML"
    CZML = "CZML"
    GEOJSON = "GEOJSON"


class SourceType(str, Enum):
    """Kind of source data being uploaded."""
    RASTER_IMAGERY = "RASTER_IMAGERY"
    CITYGML = "CITYGML"
    MODEL_3D = "3D_MODEL"
    POINT_CLOUD = "POINT_CLOUD"
    CAPTURE_3D = "3D_CAPTURE"


class MeshQuality(str, Enum):
    """Mesh quality for reconstruction from imagery."""
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class AssetStatus(str, Enum):
    """Status of an asset in the tiling pipeline."""
    NOT_STARTED = "NOT_STARTED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETE = "COMPLETE"
    DATA_ERROR = "DATA_ERROR"
    ERROR = "ERROR"

    @property
    def is_terminal(self) -> bool:
        """Whether no further transition can occur from this status."""
        return self in (AssetStatus.COMPLETE, AssetStatus.DATA_ERROR, AssetStatus.ERROR)


class IonModel(BaseModel):
    """Base model mapping snake_case attributes to the camelCase wire format."""

    model_config = ConfigDict(populate_by_name=True)

    def to_payload(self) -> Dict[str, Any]:
        """Serialize using wire names."""
        return self.model_dump(by_alias=True, mode="json", exclude_none=True)


# Asset creation request

class AssetOutputs(IonModel):
    """Output formats requested from the reconstruction."""

    cesium_3d_tiles: bool = Field(True, alias="cesium3DTiles")
    las: bool = True
    gaussian_splats: bool = Field(True, alias="gaussianSplats")


class AssetOptions(IonModel):
    """Tiling options sent alongside the asset metadata."""

    source_type: SourceType = Field(SourceType.RASTER_IMAGERY, alias="sourceType")
    mesh_quality: MeshQuality = Field(MeshQuality.MEDIUM, alias="meshQuality")
    use_gps_info: bool = Field(True, alias="useGpsInfo")
    outputs: AssetOutputs = Field(default_factory=AssetOutputs)


class AssetCreationRequest(IonModel):
    """Body of the POST /v1/assets request."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    name: str = Field(..., min_length=1)
    description: str = ""
    type: AssetType = AssetType.TILES_3D
    options: AssetOptions = Field(default_factory=AssetOptions)


# Asset creation response

class UploadLocation(IonModel):
    """Short-lived, scoped credentials for a single upload session."""

    endpoint: str
    bucket: str
    prefix: str
    access_key: str = Field(..., alias="accessKey")
    secret_access_key: str = Field(..., alias="secretAccessKey")
    session_token: str = Field(..., alias="sessionToken")

    def object_key(self, filename: str) -> str:
        """Destination key for ``filename`` inside the upload prefix."""
        return f"{self.prefix}{filename}"


class OnComplete(IonModel):
    """Callback the service expects once the upload has finished."""

    url: str
    method: str = "POST"
    fields: Dict[str, Any] = Field(default_factory=dict)


class AssetMetadata(IonModel):
    """Snapshot of an asset as reported by the service."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: int | str
    name: str = ""
    # Unknown statuses are kept as plain strings so polling can continue.
    status: Optional[Union[AssetStatus, str]] = Field(None, union_mode="left_to_right")
    percent_complete: Optional[float] = Field(None, alias="percentComplete")
    type: Optional[str] = None
    description: Optional[str] = None

    @property
    def label(self) -> str:
        """Human readable ``"<id> - <name>"`` string used in log lines."""
        return f"{self.id} - {self.name}"


class AssetCreationResponse(IonModel):
    """Response of the POST /v1/assets request."""

    asset_metadata: AssetMetadata = Field(..., alias="assetMetadata")
    additional_assets: List[AssetMetadata] = Field(default_factory=list, alias="additionalAssets")
    upload_location: UploadLocation = Field(..., alias="uploadLocation")
    on_complete: OnComplete = Field(..., alias="onComplete")

    @property
    def asset_ids(self) -> List[int | str]:
        """Primary asset ID followed by every additional asset ID."""
        return [self.asset_metadata.id] + [asset.id for asset in self.additional_assets]


# Workflow results

class AssetPollResult(BaseModel):
    """Final outcome of polling a single asset."""

    asset_id: int | str
    metadata: AssetMetadata
    checks: int = Field(1, ge=1)

    @property
    def status(self) -> Optional[Union[AssetStatus, str]]:
        return self.metadata.status

    @property
    def succeeded(self) -> bool:
        return self.metadata.status == AssetStatus.COMPLETE


class WorkflowResult(BaseModel):
    """Outcome of a full create, upload, notify and poll run."""

    creation: Optional[AssetCreationResponse] = None
    object_key: Optional[str] = None
    assets: List[AssetPollResult] = Field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        """True only when the asset was created and every asset completed."""
        return self.creation is not None and bool(self.assets) and all(a.succeeded for a in self.assets)
