"""
Create, upload, notify and poll workflow.

ReconstructionWorkflow runs the four steps in order:

1. POST the asset description and receive upload credentials,
2. upload the local file to the issued object-storage location,
3. call the completion callback so tiling starts,
4. poll every produced asset (primary plus additional assets) concurrently
   until each one reaches a terminal status.
"""

import contextlib
from collections.abc import Callable
from typing import Optional

import structlog

from ion_reconstruction.clients.base import AssetCreationError
from ion_reconstruction.clients.ion_client import IonAPIClient
from ion_reconstruction.models.asset_model import AssetCreationResponse, UploadLocation, WorkflowResult
from ion_reconstruction.storage.s3_uploader import S3Uploader
from ion_reconstruction.utils.validators import FileValidator

from .config import WorkflowConfig
from .status_poller import StatusPoller
from .task_manager import PollerManager

logger = structlog.get_logger(__name__)

UploaderFactory = Callable[[UploadLocation, str], S3Uploader]


class ReconstructionWorkflow:
    """Runs one asset through creation, upload and tiling."""

    def __init__(
        self,
        config: WorkflowConfig,
        client: Optional[IonAPIClient] = None,
        uploader_factory: Optional[UploaderFactory] = None,
    ):
        self.config = config
        self._client = client
        self.uploader_factory = uploader_factory or (lambda location, region: S3Uploader(location, region=region))
        self.poller_manager = PollerManager()

    async def run(self) -> WorkflowResult:
        """Run the full workflow and return the final status of every asset."""
        self.config.validate()
        FileValidator.validate_input_file(self.config.input_path)

        async with contextlib.AsyncExitStack() as stack:
            client = self._client
            if client is None:
                client = await stack.enter_async_context(IonAPIClient(self.config.client_config()))
            stack.push_async_callback(self.poller_manager.shutdown)
            return await self._run_steps(client)

    async def _run_steps(self, client: IonAPIClient) -> WorkflowResult:
        # Step 1: describe the data
        try:
            creation = await client.create_asset(self.config.build_request())
        except AssetCreationError as e:
            logger.error("Creating asset failed", status_code=e.status_code, response=e.response_text)
            return WorkflowResult()

        # Step 2: upload to the temporary location
        logger.info(f"Asset created. Uploading {self.config.input_path}")
        object_key = await self.upload(creation)

        # Step 3: tell the service the upload is done
        await client.notify_upload_complete(creation.on_complete)
        logger.info("Upload completion acknowledged", asset_id=creation.asset_metadata.id)

        # Step 4: monitor tiling of every produced asset
        assets = await self.poll_assets(client, creation)

        return WorkflowResult(creation=creation, object_key=object_key, assets=assets)

    async def upload(self, creation: AssetCreationResponse) -> str:
        uploader = self.uploader_factory(creation.upload_location, self.config.upload_region)
        return await uploader.upload_file(self.config.input_path, filename=self.config.object_filename)

    async def poll_assets(self, client: IonAPIClient, creation: AssetCreationResponse) -> list:
        """Start one poller per asset ID and wait for all of them."""
        poller = StatusPoller(
            client,
            interval=self.config.poll_interval,
            max_attempts=self.config.max_poll_attempts,
            timeout_seconds=self.config.poll_timeout,
            viewer_base=self.config.viewer_base,
            support_contact=self.config.support_contact,
        )

        asset_ids = []
        for asset_id in creation.asset_ids:
            if str(asset_id) in self.poller_manager.tasks:
                logger.warning("Asset listed more than once, polling it once", asset_id=asset_id)
                continue
            self.poller_manager.start(asset_id, poller.wait_until_ready(asset_id))
            asset_ids.append(str(asset_id))

        logger.info("Monitoring tiling", asset_ids=asset_ids)
        return await self.poller_manager.join()
