"""
ion REST API integration.

This module provides the IonAPIClient class used to create assets, signal
that an upload has finished, and read asset status snapshots.
"""

import contextlib
import json
from typing import Any

import aiohttp
import structlog

from ion_reconstruction.models.asset_model import (
    AssetCreationRequest,
    AssetCreationResponse,
    AssetMetadata,
    OnComplete,
)

from .base import APIError, AssetCreationError, BaseServiceIntegration, CompletionNotificationError

logger = structlog.get_logger(__name__)


class IonAPIClient(BaseServiceIntegration):
    """Authenticated client for the ion asset endpoints."""

    async def initialize(self) -> None:
        """Create the HTTP session in the current event loop."""
        if self.session and not self.session.closed:
            with contextlib.suppress(Exception):
                await self.session.close()
        timeout = aiohttp.ClientTimeout(total=self.config.timeout_seconds)
        self.session = aiohttp.ClientSession(timeout=timeout)
        logger.debug("Created HTTP session", base_url=self.config.base_url)

    async def cleanup(self) -> None:
        """Clean up resources."""
        if self.session:
            await self.session.close()
            self.session = None

    def _require_session(self) -> Any:
        if not self.session or self.session.closed:
            raise APIError("HTTP session not available", error_code="NO_HTTP_SESSION")
        return self.session

    async def create_asset(self, request: AssetCreationRequest) -> AssetCreationResponse:
        """POST the asset description and return upload instructions."""
        session = self._require_session()
        url = self.config.url("/v1/assets")
        payload = request.to_payload()

        logger.info("Creating new asset", name=request.name, type=request.type.value)
        logger.debug("Asset creation payload", payload=payload)

        try:
            async with session.post(url, headers=self.config.auth_headers, json=payload) as response:
                # Only 200 carries upload credentials
                if response.status != 200:
                    error_text = await response.text()
                    raise AssetCreationError(
                        f"Creating asset failed: {response.status}",
                        error_code="ASSET_CREATION_FAILED",
                        status_code=response.status,
                        response_text=error_text,
                    )
                data = await response.json()
        except aiohttp.ClientError as e:
            raise APIError(f"Asset creation request failed: {e}", original_exception=e) from e

        creation = AssetCreationResponse.model_validate(data)

        logger.info("Created asset", asset_id=creation.asset_metadata.id, name=creation.asset_metadata.name)
        for additional in creation.additional_assets:
            logger.info("Created additional asset", asset_id=additional.id, name=additional.name)

        return creation

    async def notify_upload_complete(self, on_complete: OnComplete) -> int:
        """Call the completion callback, echoing its fields as the body."""
        session = self._require_session()

        logger.info("Notifying upload complete", url=on_complete.url, method=on_complete.method)

        try:
            async with session.request(
                on_complete.method.upper(),
                on_complete.url,
                headers=self.config.auth_headers,
                data=json.dumps(on_complete.fields),
            ) as response:
                if not 200 <= response.status < 300:
                    error_text = await response.text()
                    raise CompletionNotificationError(
                        f"Upload completion notification failed: {response.status}",
                        error_code="COMPLETION_NOTIFICATION_FAILED",
                        status_code=response.status,
                        response_text=error_text,
                    )
                return response.status
        except aiohttp.ClientError as e:
            raise CompletionNotificationError(
                f"Upload completion request failed: {e}", original_exception=e
            ) from e

    async def get_asset(self, asset_id: int | str) -> AssetMetadata:
        """Fetch the current metadata snapshot of an asset."""
        session = self._require_session()
        url = self.config.url(f"/v1/assets/{asset_id}")

        try:
            async with session.get(url, headers=self.config.auth_headers) as response:
                if response.status != 200:
                    error_text = await response.text()
                    raise APIError(
                        f"Asset status request failed: {response.status}",
                        error_code="ASSET_STATUS_FAILED",
                        status_code=response.status,
                        response_text=error_text,
                    )
                data = await response.json()
        except aiohttp.ClientError as e:
            raise APIError(f"Asset status request failed: {e}", original_exception=e) from e

        return AssetMetadata.model_validate(data)
