"""
Per-asset poller task management.

This module tracks one asyncio task per polled asset, supports cancelling a
single poller or all of them, and joins every poller with an optional timeout.
"""

import asyncio
from collections.abc import Coroutine
from datetime import datetime
from typing import Any, Dict, List, Optional

import structlog

from ion_reconstruction.clients.base import PollingTimeoutError

logger = structlog.get_logger(__name__)


class PollerManager:
    """Manages the status poller tasks of a workflow run."""

    def __init__(self):
        self.tasks: Dict[str, asyncio.Task] = {}
        self.task_status: Dict[str, Dict[str, Any]] = {}

    def start(self, asset_id: int | str, coro: Coroutine) -> str:
        """Start a poller task for ``asset_id`` and return its key."""
        key = str(asset_id)
        if key in self.tasks and not self.tasks[key].done():
            coro.close()
            raise ValueError(f"A poller is already running for asset {asset_id}")

        task = asyncio.create_task(coro, name=f"poll-asset-{key}")
        task.add_done_callback(lambda t, key=key: self._on_done(key, t))
        self.tasks[key] = task
        self.task_status[key] = {
            "created_at": datetime.utcnow(),
            "status": "polling",
            "result": None,
            "error": None,
        }
        logger.debug("Started poller", asset_id=key)
        return key

    def _on_done(self, key: str, task: asyncio.Task) -> None:
        if task.cancelled():
            self.update_status(key, status="cancelled")
        elif task.exception() is not None:
            self.update_status(key, status="failed", error=str(task.exception()))
        else:
            self.update_status(key, status="finished", result=task.result())

    def get_status(self, asset_id: int | str) -> Dict[str, Any]:
        """Get the current status of a poller."""
        return self.task_status.get(str(asset_id), {"status": "not_found"})

    def update_status(self, key: str, **kwargs) -> None:
        if key in self.task_status:
            self.task_status[key].update(kwargs)
            self.task_status[key]["updated_at"] = datetime.utcnow()

    def cancel(self, asset_id: int | str) -> bool:
        """Cancel a running poller."""
        task = self.tasks.get(str(asset_id))
        if task and not task.done():
            task.cancel()
            return True
        return False

    @property
    def active_count(self) -> int:
        return sum(1 for task in self.tasks.values() if not task.done())

    async def join(self, timeout: Optional[float] = None) -> List[Any]:
        """
        Wait for every poller and return their results in start order.

        The first poller exception propagates after the remaining pollers are
        cancelled. When ``timeout`` expires, unfinished pollers are cancelled
        and PollingTimeoutError is raised.
        """
        if not self.tasks:
            return []

        keys = list(self.tasks)
        done, pending = await asyncio.wait(
            self.tasks.values(), timeout=timeout, return_when=asyncio.FIRST_EXCEPTION
        )

        failed = [
            self.tasks[key]
            for key in keys
            if self.tasks[key] in done and not self.tasks[key].cancelled() and self.tasks[key].exception() is not None
        ]
        if pending:
            for task in pending:
                task.cancel()
            await asyncio.gather(*pending, return_exceptions=True)

        if failed:
            raise failed[0].exception()

        if pending:
            unfinished = [key for key in keys if self.tasks[key] in pending]
            raise PollingTimeoutError(
                f"Pollers for assets {', '.join(unfinished)} did not finish within {timeout} seconds",
                timeout_duration=timeout,
                details={"unfinished": unfinished},
            )

        results = []
        for key in keys:
            task = self.tasks[key]
            # Pollers cancelled individually have no result
            if not task.cancelled():
                results.append(task.result())
        return results

    async def shutdown(self) -> None:
        """Cancel every running poller and wait for them to exit."""
        for task in self.tasks.values():
            if not task.done():
                task.cancel()

        if self.tasks:
            await asyncio.gather(*self.tasks.values(), return_exceptions=True)

        self.tasks.clear()
        self.task_status.clear()
