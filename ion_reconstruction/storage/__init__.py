"""
Object storage upload support.

This module uploads source data to the short-lived S3-compatible location
issued by the tiling service.
"""

from .cloud_storage import (
    NetworkError,
    ProgressTracker,
    StorageError,
    StoragePermissionError,
    UploadError,
    UploadProgress,
    progress_percentage,
)
from .s3_uploader import DEFAULT_REGION, S3Uploader

__all__ = [
    # Uploader
    "S3Uploader",
    "DEFAULT_REGION",
    # Progress
    "UploadProgress",
    "ProgressTracker",
    "progress_percentage",
    # Exceptions
    "StorageError",
    "UploadError",
    "StoragePermissionError",
    "NetworkError",
]
