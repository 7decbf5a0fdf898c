"""
Environment-based configuration for the ion reconstruction uploader.

Settings are read from environment variables, optionally loaded from a .env
file in the working directory, and converted into a WorkflowConfig.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from ion_reconstruction.clients.configs import DEFAULT_API_BASE
from ion_reconstruction.core.config import (
    DEFAULT_POLL_INTERVAL,
    DEFAULT_SUPPORT_CONTACT,
    DEFAULT_VIEWER_BASE,
    WorkflowConfig,
)
from ion_reconstruction.models.asset_model import AssetOutputs, AssetType, MeshQuality, SourceType
from ion_reconstruction.storage.s3_uploader import DEFAULT_REGION

from .validators import ConfigValidationException

logger = logging.getLogger(__name__)

DEFAULT_OUTPUTS = ["cesium3DTiles", "las", "gaussianSplats"]


def load_env_file(env_file: Path | None = None) -> bool:
    """Load variables from ``env_file`` (default ``./.env``) without overriding the environment."""
    env_file = env_file or Path.cwd() / ".env"
    if env_file.exists():
        load_dotenv(env_file, override=False)
        logger.info(f"Loaded environment variables from: {env_file}")
        return True
    return False


def get_env_bool(key: str, default: bool = False) -> bool:
    """Get boolean value from environment variable."""
    value = os.getenv(key, "").lower()
    return value in ("true", "1", "yes", "on") if value else default


def get_env_int(key: str, default: Optional[int] = None) -> Optional[int]:
    """Get integer value from environment variable."""
    try:
        value = os.getenv(key)
        return int(value) if value else default
    except ValueError:
        return default


def get_env_float(key: str, default: Optional[float] = None) -> Optional[float]:
    """Get float value from environment variable."""
    try:
        value = os.getenv(key)
        return float(value) if value else default
    except ValueError:
        return default


def get_env_list(key: str, default: Optional[list] = None, separator: str = ",") -> list:
    """Get list value from environment variable."""
    if default is None:
        default = []
    value = os.getenv(key, "")
    return [item.strip() for item in value.split(separator) if item.strip()] if value else default


@dataclass
class AppSettings:
    """Application settings from environment variables."""

    # ion API
    access_token: Optional[str] = field(default_factory=lambda: os.getenv("ION_ACCESS_TOKEN"))
    api_base: str = field(default_factory=lambda: os.getenv("ION_API_BASE", DEFAULT_API_BASE))
    request_timeout: int = field(default_factory=lambda: get_env_int("ION_REQUEST_TIMEOUT", 300))

    # Asset
    input_path: str = field(default_factory=lambda: os.getenv("ION_INPUT_PATH", "images.zip"))
    asset_name: str = field(default_factory=lambda: os.getenv("ION_ASSET_NAME", "Test Script"))
    asset_description: str = field(default_factory=lambda: os.getenv("ION_ASSET_DESCRIPTION", ""))
    asset_type: str = field(default_factory=lambda: os.getenv("ION_ASSET_TYPE", AssetType.TILES_3D.value))
    source_type: str = field(default_factory=lambda: os.getenv("ION_SOURCE_TYPE", SourceType.RASTER_IMAGERY.value))
    mesh_quality: str = field(default_factory=lambda: os.getenv("ION_MESH_QUALITY", MeshQuality.MEDIUM.value))
    use_gps_info: bool = field(default_factory=lambda: get_env_bool("ION_USE_GPS_INFO", True))
    outputs: list = field(default_factory=lambda: get_env_list("ION_OUTPUTS", DEFAULT_OUTPUTS))

    # Upload
    upload_filename: Optional[str] = field(default_factory=lambda: os.getenv("ION_UPLOAD_FILENAME") or None)
    upload_region: str = field(default_factory=lambda: os.getenv("ION_UPLOAD_REGION", DEFAULT_REGION))

    # Polling
    poll_interval: float = field(default_factory=lambda: get_env_float("ION_POLL_INTERVAL", DEFAULT_POLL_INTERVAL))
    max_poll_attempts: Optional[int] = field(default_factory=lambda: get_env_int("ION_MAX_POLL_ATTEMPTS"))
    poll_timeout: Optional[float] = field(default_factory=lambda: get_env_float("ION_POLL_TIMEOUT"))

    # Messages
    viewer_base: str = field(default_factory=lambda: os.getenv("ION_VIEWER_BASE", DEFAULT_VIEWER_BASE))
    support_contact: str = field(default_factory=lambda: os.getenv("ION_SUPPORT_CONTACT", DEFAULT_SUPPORT_CONTACT))

    # Logging Configuration
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))
    log_json_format: bool = field(default_factory=lambda: get_env_bool("LOG_JSON_FORMAT", False))

    def get_outputs(self) -> AssetOutputs:
        """Build the requested output set from the ``outputs`` name list."""
        known = {"cesium3DTiles": "cesium_3d_tiles", "las": "las", "gaussianSplats": "gaussian_splats"}
        unknown = [name for name in self.outputs if name not in known]
        if unknown:
            raise ConfigValidationException(
                f"Unknown output format(s): {', '.join(unknown)}", field="outputs", code="INVALID_OUTPUT"
            )
        return AssetOutputs(**{attr: wire in self.outputs for wire, attr in known.items()})

    def get_workflow_config(self) -> WorkflowConfig:
        """Get workflow configuration from the current settings."""
        try:
            asset_type = AssetType(self.asset_type)
            source_type = SourceType(self.source_type)
            mesh_quality = MeshQuality(self.mesh_quality)
        except ValueError as e:
            raise ConfigValidationException(str(e), code="INVALID_ENUM") from e

        return WorkflowConfig(
            access_token=self.access_token or "",
            input_path=Path(self.input_path),
            asset_name=self.asset_name,
            asset_description=self.asset_description,
            asset_type=asset_type,
            source_type=source_type,
            mesh_quality=mesh_quality,
            use_gps_info=self.use_gps_info,
            outputs=self.get_outputs(),
            api_base=self.api_base,
            request_timeout=self.request_timeout,
            upload_filename=self.upload_filename,
            upload_region=self.upload_region,
            poll_interval=self.poll_interval,
            max_poll_attempts=self.max_poll_attempts,
            poll_timeout=self.poll_timeout,
            viewer_base=self.viewer_base,
            support_contact=self.support_contact,
        )


# Global settings instance
_settings: Optional[AppSettings] = None


def get_settings() -> AppSettings:
    """Get the global application settings instance."""
    global _settings
    if _settings is None:
        load_env_file()
        _settings = AppSettings()
    return _settings

