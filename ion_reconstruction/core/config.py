"""
Workflow configuration.

WorkflowConfig gathers every value the upload workflow needs: credentials,
the asset description sent on creation, the local source file and the polling
limits. It is passed explicitly to ReconstructionWorkflow.
"""

from dataclasses import dataclass, field
from pathlib import Path

from ion_reconstruction.clients.configs import DEFAULT_API_BASE, IonClientConfig
from ion_reconstruction.models.asset_model import (
    AssetCreationRequest,
    AssetOptions,
    AssetOutputs,
    AssetType,
    MeshQuality,
    SourceType,
)
from ion_reconstruction.storage.s3_uploader import DEFAULT_REGION
from ion_reconstruction.utils.validators import ConfigValidator

DEFAULT_POLL_INTERVAL = 10.0
DEFAULT_VIEWER_BASE = "https://cesium.com/ion/assets"
DEFAULT_SUPPORT_CONTACT = "support@cesium.com"


@dataclass
class WorkflowConfig:
    """Configuration for one create, upload, notify and poll run."""

    access_token: str
    input_path: Path = Path("images.zip")
    asset_name: str = "Test Script"
    asset_description: str = ""
    asset_type: AssetType = AssetType.TILES_3D
    source_type: SourceType = SourceType.RASTER_IMAGERY
    mesh_quality: MeshQuality = MeshQuality.MEDIUM
    use_gps_info: bool = True
    outputs: AssetOutputs = field(default_factory=AssetOutputs)

    api_base: str = DEFAULT_API_BASE
    request_timeout: int = 300
    upload_filename: str | None = None
    upload_region: str = DEFAULT_REGION

    # None keeps polling until a terminal status is observed
    poll_interval: float = DEFAULT_POLL_INTERVAL
    max_poll_attempts: int | None = None
    poll_timeout: float | None = None

    viewer_base: str = DEFAULT_VIEWER_BASE
    support_contact: str = DEFAULT_SUPPORT_CONTACT

    def __post_init__(self) -> None:
        self.input_path = Path(self.input_path)

    def validate(self) -> None:
        """Validate configuration values, raising ConfigValidationException."""
        self.access_token = ConfigValidator.validate_access_token(self.access_token)
        self.asset_name = ConfigValidator.validate_asset_name(self.asset_name)
        ConfigValidator.validate_positive(self.poll_interval, "poll_interval")
        ConfigValidator.validate_positive(self.max_poll_attempts, "max_poll_attempts", optional=True)
        ConfigValidator.validate_positive(self.poll_timeout, "poll_timeout", optional=True)

    @property
    def object_filename(self) -> str:
        """Filename appended to the upload prefix."""
        return self.upload_filename or self.input_path.name

    def build_request(self) -> AssetCreationRequest:
        return AssetCreationRequest(
            name=self.asset_name,
            description=self.asset_description,
            type=self.asset_type,
            options=AssetOptions(
                source_type=self.source_type,
                mesh_quality=self.mesh_quality,
                use_gps_info=self.use_gps_info,
                outputs=self.outputs,
            ),
        )

    def client_config(self) -> IonClientConfig:
        return IonClientConfig(
            access_token=self.access_token,
            base_url=self.api_base,
            timeout_seconds=self.request_timeout,
        )
