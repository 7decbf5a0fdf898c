"""
Error types and the base class for ion REST API integrations.

This module provides the exception hierarchy raised by the REST client and the
status poller, and the async context manager base used to manage the HTTP
session lifecycle.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from .configs import IonClientConfig


class ErrorSeverity(str, Enum):
    """Error severity levels."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


# Error Handling Classes

class IonError(Exception):
    """Base exception for all errors talking to the tiling service."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        severity: ErrorSeverity = ErrorSeverity.MEDIUM,
        details: Optional[Dict[str, Any]] = None,
        original_exception: Optional[Exception] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.severity = severity
        self.details = details or {}
        self.original_exception = original_exception
        self.timestamp = datetime.utcnow()

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary format."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "error_code": self.error_code,
            "severity": self.severity.value,
            "details": self.details,
            "timestamp": self.timestamp.isoformat(),
            "original_exception": str(self.original_exception) if self.original_exception else None,
        }


class APIError(IonError):
    """Unexpected HTTP status or transport failure from the REST API."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        response_text: Optional[str] = None,
        **kwargs,
    ):
        super().__init__(message, **kwargs)
        self.status_code = status_code
        self.response_text = response_text
        self.details.update({
            "status_code": status_code,
            "response_text": response_text,
        })


class AssetCreationError(APIError):
    """POST /v1/assets did not return 200."""


class CompletionNotificationError(APIError):
    """The upload completion callback was rejected."""

    def __init__(self, message: str, **kwargs):
        super().__init__(message, severity=ErrorSeverity.HIGH, **kwargs)


class PollingTimeoutError(IonError):
    """An asset did not reach a terminal status within the polling limits."""

    def __init__(
        self,
        message: str,
        asset_id: Optional[Any] = None,
        attempts: Optional[int] = None,
        timeout_duration: Optional[float] = None,
        **kwargs,
    ):
        super().__init__(message, **kwargs)
        self.asset_id = asset_id
        self.attempts = attempts
        self.timeout_duration = timeout_duration
        self.details.update({
            "asset_id": asset_id,
            "attempts": attempts,
            "timeout_duration": timeout_duration,
        })


class BaseServiceIntegration:
    """Base class for REST integrations owning an HTTP session."""

    def __init__(self, config: IonClientConfig) -> None:
        self.config = config
        self.session: Any | None = None  # Will be initialized as needed

    async def __aenter__(self) -> "BaseServiceIntegration":
        """Async context manager entry."""
        await self.initialize()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit."""
        await self.cleanup()

    async def initialize(self) -> None:
        """Initialize the service integration."""
        pass

    async def cleanup(self) -> None:
        """Clean up resources."""
        pass
