from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from conftest import asset_snapshot
from ion_reconstruction.clients.base import APIError, PollingTimeoutError
from ion_reconstruction.core.status_poller import StatusPoller
from ion_reconstruction.models.asset_model import AssetStatus


@pytest.fixture
def mock_client() -> MagicMock:
    client = MagicMock()
    client.get_asset = AsyncMock()
    return client


@pytest.fixture
def mock_sleep(mocker: Any) -> AsyncMock:
    return mocker.patch("ion_reconstruction.core.status_poller.asyncio.sleep", new_callable=AsyncMock)


@pytest.fixture
def mock_logger(mocker: Any) -> MagicMock:
    return mocker.patch("ion_reconstruction.core.status_poller.logger")


def logged_messages(logger: MagicMock) -> list[str]:
    calls = logger.info.call_args_list + logger.warning.call_args_list + logger.error.call_args_list
    return [c.args[0] for c in calls]


class TestCheckStatus:
    """Test suite for a single status check."""

    @pytest.mark.asyncio
    async def test_complete_stops_and_logs_viewer_url(self, mock_client: MagicMock, mock_logger: MagicMock) -> None:
        mock_client.get_asset.return_value = asset_snapshot(12345, "COMPLETE")
        poller = StatusPoller(mock_client)

        metadata, should_continue = await poller.check_status(12345)

        assert not should_continue
        assert metadata.status == AssetStatus.COMPLETE
        assert "View in ion: https://cesium.com/ion/assets/12345" in logged_messages(mock_logger)

    @pytest.mark.asyncio
    async def test_data_error_stops(self, mock_client: MagicMock, mock_logger: MagicMock) -> None:
        mock_client.get_asset.return_value = asset_snapshot(1, "DATA_ERROR")

        _, should_continue = await StatusPoller(mock_client).check_status(1)

        assert not should_continue
        assert any("problem with the uploaded data for 1 - Test Script" in m for m in logged_messages(mock_logger))

    @pytest.mark.asyncio
    async def test_error_stops_and_names_support_contact(self, mock_client: MagicMock, mock_logger: MagicMock) -> None:
        mock_client.get_asset.return_value = asset_snapshot(1, "ERROR")

        _, should_continue = await StatusPoller(mock_client, support_contact="help@example.com").check_status(1)

        assert not should_continue
        assert any("help@example.com" in m for m in logged_messages(mock_logger))

    @pytest.mark.asyncio
    async def test_not_started_continues(self, mock_client: MagicMock, mock_logger: MagicMock) -> None:
        mock_client.get_asset.return_value = asset_snapshot(1, "NOT_STARTED")

        _, should_continue = await StatusPoller(mock_client).check_status(1)

        assert should_continue
        assert "Tiling pipeline initializing for 1 - Test Script" in logged_messages(mock_logger)

    @pytest.mark.asyncio
    async def test_in_progress_logs_percentage(self, mock_client: MagicMock, mock_logger: MagicMock) -> None:
        mock_client.get_asset.return_value = asset_snapshot(1, "IN_PROGRESS", percent=37)

        _, should_continue = await StatusPoller(mock_client).check_status(1)

        assert should_continue
        assert any("37" in m and "complete" in m for m in logged_messages(mock_logger))

    @pytest.mark.asyncio
    async def test_unknown_status_continues(self, mock_client: MagicMock, mock_logger: MagicMock) -> None:
        mock_client.get_asset.return_value = asset_snapshot(1, "AWAITING_FILES")

        _, should_continue = await StatusPoller(mock_client).check_status(1)

        assert should_continue
        mock_logger.warning.assert_called_once()


class TestWaitUntilReady:
    """Test suite for the polling loop."""

    @pytest.mark.asyncio
    async def test_reschedules_once_per_non_terminal_check(
        self, mock_client: MagicMock, mock_sleep: AsyncMock
    ) -> None:
        mock_client.get_asset.side_effect = [
            asset_snapshot(1, "NOT_STARTED"),
            asset_snapshot(1, "IN_PROGRESS", percent=50),
            asset_snapshot(1, "IN_PROGRESS", percent=90),
            asset_snapshot(1, "COMPLETE"),
        ]

        result = await StatusPoller(mock_client).wait_until_ready(1)

        assert result.succeeded
        assert result.checks == 4
        assert mock_sleep.await_count == 3
        assert all(c.args == (10.0,) for c in mock_sleep.await_args_list)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", ["COMPLETE", "DATA_ERROR", "ERROR"])
    async def test_terminal_status_never_reschedules(
        self, mock_client: MagicMock, mock_sleep: AsyncMock, status: str
    ) -> None:
        mock_client.get_asset.return_value = asset_snapshot(1, status)

        result = await StatusPoller(mock_client).wait_until_ready(1)

        assert result.checks == 1
        assert result.status == AssetStatus(status)
        mock_client.get_asset.assert_awaited_once_with(1)
        mock_sleep.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_custom_interval(self, mock_client: MagicMock, mock_sleep: AsyncMock) -> None:
        mock_client.get_asset.side_effect = [asset_snapshot(1, "NOT_STARTED"), asset_snapshot(1, "COMPLETE")]

        await StatusPoller(mock_client, interval=2.5).wait_until_ready(1)

        mock_sleep.assert_awaited_once_with(2.5)

    @pytest.mark.asyncio
    async def test_max_attempts_guard(self, mock_client: MagicMock, mock_sleep: AsyncMock) -> None:
        mock_client.get_asset.return_value = asset_snapshot(1, "IN_PROGRESS", percent=10)

        with pytest.raises(PollingTimeoutError) as exc_info:
            await StatusPoller(mock_client, max_attempts=3).wait_until_ready(1)

        assert exc_info.value.attempts == 3
        assert mock_client.get_asset.await_count == 3
        assert mock_sleep.await_count == 2

    @pytest.mark.asyncio
    async def test_timeout_guard(self, mock_client: MagicMock, mock_sleep: AsyncMock) -> None:
        mock_client.get_asset.return_value = asset_snapshot(1, "NOT_STARTED")

        with pytest.raises(PollingTimeoutError) as exc_info:
            await StatusPoller(mock_client, interval=10, timeout_seconds=5).wait_until_ready(1)

        assert exc_info.value.timeout_duration == 5
        mock_sleep.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_status_request_failure_propagates(self, mock_client: MagicMock, mock_sleep: AsyncMock) -> None:
        mock_client.get_asset.side_effect = APIError("Asset status request failed: 500", status_code=500)

        with pytest.raises(APIError):
            await StatusPoller(mock_client).wait_until_ready(1)
