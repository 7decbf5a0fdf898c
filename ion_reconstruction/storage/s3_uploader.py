"""
Upload to the temporary S3-compatible location issued by the tiling service.

The asset creation response carries an endpoint, a bucket, a key prefix and a
short-lived credential triple. S3Uploader builds a boto3 client from those and
streams the local file with boto3's managed transfer, which switches to a
multipart upload above the configured threshold.
"""

import asyncio
from collections.abc import Callable
from pathlib import Path
from typing import Any

import boto3
import structlog
from boto3.exceptions import S3UploadFailedError
from boto3.s3.transfer import TransferConfig
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError, EndpointConnectionError

from ion_reconstruction.models.asset_model import UploadLocation
from ion_reconstruction.utils.validators import FileValidator

from .cloud_storage import (
    NetworkError,
    ProgressTracker,
    StoragePermissionError,
    UploadError,
    UploadProgress,
)

logger = structlog.get_logger(__name__)

DEFAULT_REGION = "us-east-1"
MULTIPART_THRESHOLD = 8 * 1024 * 1024  # 8MB
MULTIPART_CHUNK_SIZE = 8 * 1024 * 1024  # 8MB


class S3Uploader:
    """Uploads a single file using credentials from an UploadLocation."""

    def __init__(
        self,
        location: UploadLocation,
        region: str = DEFAULT_REGION,
        multipart_threshold: int = MULTIPART_THRESHOLD,
        multipart_chunksize: int = MULTIPART_CHUNK_SIZE,
        max_concurrency: int = 4,
    ):
        self.location = location
        self.region = region
        self.transfer_config = TransferConfig(
            multipart_threshold=multipart_threshold,
            multipart_chunksize=multipart_chunksize,
            max_concurrency=max_concurrency,
        )
        self._s3_client = None

    def _client(self):
        if self._s3_client is None:
            self._s3_client = boto3.client(
                "s3",
                endpoint_url=self.location.endpoint,
                region_name=self.region,
                aws_access_key_id=self.location.access_key,
                aws_secret_access_key=self.location.secret_access_key,
                aws_session_token=self.location.session_token,
                config=Config(retries={"max_attempts": 1, "mode": "standard"}),
            )
        return self._s3_client

    async def upload_file(
        self,
        file_path: str | Path,
        filename: str | None = None,
        progress_callback: Callable[[UploadProgress], Any] | None = None,
    ) -> str:
        """
        Upload ``file_path`` under the location prefix and return the object key.

        Args:
            file_path: Local file to upload
            filename: Name appended to the prefix, defaults to the file's name
            progress_callback: Called from transfer threads with each new percentage

        Returns:
            The key the file was stored under
        """
        file_path = Path(file_path)
        key = self.location.object_key(filename or file_path.name)
        total_bytes = file_path.stat().st_size

        def report(progress: UploadProgress) -> None:
            logger.info("Upload progress", key=key, percentage=progress.percentage)
            if progress_callback:
                progress_callback(progress)

        tracker = ProgressTracker(total_bytes, report)
        client = self._client()

        logger.info("Uploading file", path=str(file_path), bucket=self.location.bucket, key=key, size=FileValidator.format_file_size(total_bytes))

        try:
            with open(file_path, "rb") as f:
                await self._run_sync(
                    client.upload_fileobj,
                    f,
                    self.location.bucket,
                    key,
                    Callback=tracker,
                    Config=self.transfer_config,
                )
        except ClientError as e:
            self._handle_client_error(e, f"upload file {key}")
        except EndpointConnectionError as e:
            raise NetworkError(f"Could not reach upload endpoint {self.location.endpoint}: {e}") from e
        except (BotoCoreError, S3UploadFailedError) as e:
            raise UploadError(f"Failed to upload file {key}: {e}") from e

        # Zero-byte files never trigger a transfer callback
        if tracker.last_percentage is None:
            tracker(0)

        logger.info("Upload complete", key=key)
        return key

    async def _run_sync(self, func, *args, **kwargs):
        """Run a synchronous function in the async context."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, lambda: func(*args, **kwargs))

    def _handle_client_error(self, error: ClientError, operation: str) -> None:
        """Convert S3 client errors to storage exceptions."""
        error_code = error.response.get("Error", {}).get("Code", "UNKNOWN")
        status_code = error.response.get("ResponseMetadata", {}).get("HTTPStatusCode")
        message = error.response.get("Error", {}).get("Message", str(error))

        if error_code in ["AccessDenied", "Forbidden", "403", "ExpiredToken", "InvalidAccessKeyId"]:
            raise StoragePermissionError(
                f"Access denied during {operation}: {message}",
                error_code=error_code,
                status_code=status_code,
            ) from error
        elif error_code in ["RequestTimeout", "ServiceUnavailable", "SlowDown"]:
            raise NetworkError(
                f"Network error during {operation}: {message}",
                error_code=error_code,
                status_code=status_code,
            ) from error
        raise UploadError(
            f"Failed to {operation}: {message}",
            error_code=error_code,
            status_code=status_code,
        ) from error

