"""
Data models for assets, upload locations and workflow results.
"""

from .asset_model import (
    AssetCreationRequest,
    AssetCreationResponse,
    AssetMetadata,
    AssetOptions,
    AssetOutputs,
    AssetPollResult,
    AssetStatus,
    AssetType,
    MeshQuality,
    OnComplete,
    SourceType,
    UploadLocation,
    WorkflowResult,
)

__all__ = [
    "AssetCreationRequest",
    "AssetCreationResponse",
    "AssetMetadata",
    "AssetOptions",
    "AssetOutputs",
    "AssetPollResult",
    "AssetStatus",
    "AssetType",
    "MeshQuality",
    "OnComplete",
    "SourceType",
    "UploadLocation",
    "WorkflowResult",
]
