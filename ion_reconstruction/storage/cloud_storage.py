"""
Shared types for uploads to S3-compatible object storage.

This module defines the upload progress record, the thread-safe progress
tracker fed by boto3 transfer callbacks, and the storage exception hierarchy.
"""

import math
import threading
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any


@dataclass
class UploadProgress:
    """Progress information for file uploads."""

    bytes_uploaded: int
    total_bytes: int
    percentage: int

    @property
    def is_complete(self) -> bool:
        """Check if upload is complete."""
        return self.bytes_uploaded >= self.total_bytes


def progress_percentage(loaded: int, total: int) -> int:
    """Whole percentage of ``loaded`` over ``total``; an empty upload is 100%."""
    if total <= 0:
        return 100
    # Halves round up
    return math.floor(loaded / total * 100 + 0.5)


class ProgressTracker:
    """
    Accumulates transferred byte counts and reports whole percentages.

    boto3 calls the tracker from its transfer threads with the number of bytes
    sent since the previous call. A report is emitted only when the rounded
    percentage changes, and reported percentages never decrease.
    """

    def __init__(self, total_bytes: int, callback: Callable[[UploadProgress], Any] | None = None):
        self.total_bytes = total_bytes
        self.callback = callback
        self.bytes_uploaded = 0
        self.last_percentage: int | None = None
        self._lock = threading.Lock()

    def __call__(self, bytes_amount: int) -> None:
        with self._lock:
            self.bytes_uploaded = min(self.bytes_uploaded + bytes_amount, self.total_bytes)
            percentage = progress_percentage(self.bytes_uploaded, self.total_bytes)
            if self.last_percentage is not None and percentage <= self.last_percentage:
                return
            self.last_percentage = percentage
            progress = UploadProgress(
                bytes_uploaded=self.bytes_uploaded,
                total_bytes=self.total_bytes,
                percentage=percentage,
            )
        if self.callback:
            self.callback(progress)


class StorageError(Exception):
    """Base exception for storage operations."""

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "error_code": self.error_code,
            "status_code": self.status_code,
            "details": self.details,
        }


class UploadError(StorageError):
    """Upload to object storage failed."""

    pass


class StoragePermissionError(StorageError):
    """Credentials were rejected or have expired."""

    pass


class NetworkError(StorageError):
    """Network-related storage error."""

    pass
