"""
Asset status polling.

The tiling service drives every status transition; the poller only observes
snapshots. Each check reads ``GET /v1/assets/{id}`` once and either stops on a
terminal status or schedules exactly one more check after a fixed interval.
"""

import asyncio
from typing import Optional

import structlog

from ion_reconstruction.clients.base import PollingTimeoutError
from ion_reconstruction.clients.ion_client import IonAPIClient
from ion_reconstruction.models.asset_model import AssetMetadata, AssetPollResult, AssetStatus

from .config import DEFAULT_POLL_INTERVAL, DEFAULT_SUPPORT_CONTACT, DEFAULT_VIEWER_BASE

logger = structlog.get_logger(__name__)


class StatusPoller:
    """Polls one or more assets until each reaches a terminal status."""

    def __init__(
        self,
        client: IonAPIClient,
        interval: float = DEFAULT_POLL_INTERVAL,
        max_attempts: Optional[int] = None,
        timeout_seconds: Optional[float] = None,
        viewer_base: str = DEFAULT_VIEWER_BASE,
        support_contact: str = DEFAULT_SUPPORT_CONTACT,
    ):
        self.client = client
        self.interval = interval
        self.max_attempts = max_attempts
        self.timeout_seconds = timeout_seconds
        self.viewer_base = viewer_base.rstrip("/")
        self.support_contact = support_contact

    def viewer_url(self, asset_id: int | str) -> str:
        return f"{self.viewer_base}/{asset_id}"

    async def check_status(self, asset_id: int | str) -> tuple[AssetMetadata, bool]:
        """
        Fetch one status snapshot and log it.

        Returns:
            The snapshot and whether another check should be scheduled
        """
        metadata = await self.client.get_asset(asset_id)
        label = metadata.label
        status = metadata.status

        if status == AssetStatus.COMPLETE:
            logger.info(f"{label} tiled successfully", asset_id=metadata.id)
            logger.info(f"View in ion: {self.viewer_url(metadata.id)}", asset_id=metadata.id)
            return metadata, False

        if status == AssetStatus.DATA_ERROR:
            logger.error(f"ion detected a problem with the uploaded data for {label}.", asset_id=metadata.id)
            return metadata, False

        if status == AssetStatus.ERROR:
            logger.error(
                f"An unknown tiling error occurred, please contact {self.support_contact} regarding {label}",
                asset_id=metadata.id,
            )
            return metadata, False

        if status == AssetStatus.NOT_STARTED:
            logger.info(f"Tiling pipeline initializing for {label}", asset_id=metadata.id)
        elif status == AssetStatus.IN_PROGRESS:
            logger.info(
                f"{label} is {metadata.percent_complete}% complete.",
                asset_id=metadata.id,
                percent_complete=metadata.percent_complete,
            )
        else:
            logger.warning(f"Unknown status for {label}, continuing to poll", asset_id=metadata.id, status=status)

        return metadata, True

    async def wait_until_ready(self, asset_id: int | str) -> AssetPollResult:
        """Check ``asset_id`` every ``interval`` seconds until its status is terminal."""
        loop = asyncio.get_running_loop()
        deadline = loop.time() + self.timeout_seconds if self.timeout_seconds is not None else None
        checks = 0

        while True:
            metadata, should_continue = await self.check_status(asset_id)
            checks += 1

            if not should_continue:
                return AssetPollResult(asset_id=asset_id, metadata=metadata, checks=checks)

            if self.max_attempts is not None and checks >= self.max_attempts:
                raise PollingTimeoutError(
                    f"Asset {asset_id} still {metadata.status} after {checks} status checks",
                    asset_id=asset_id,
                    attempts=checks,
                )
            if deadline is not None and loop.time() + self.interval > deadline:
                raise PollingTimeoutError(
                    f"Asset {asset_id} did not finish tiling within {self.timeout_seconds} seconds",
                    asset_id=asset_id,
                    attempts=checks,
                    timeout_duration=self.timeout_seconds,
                )

            await asyncio.sleep(self.interval)
