"""
REST API clients for the ion tiling service.
"""

from .base import (
    APIError,
    AssetCreationError,
    BaseServiceIntegration,
    CompletionNotificationError,
    ErrorSeverity,
    IonError,
    PollingTimeoutError,
)
from .configs import DEFAULT_API_BASE, IonClientConfig
from .ion_client import IonAPIClient

__all__ = [
    "BaseServiceIntegration",
    "IonAPIClient",
    "IonClientConfig",
    "DEFAULT_API_BASE",
    # Error classes
    "IonError",
    "APIError",
    "AssetCreationError",
    "CompletionNotificationError",
    "PollingTimeoutError",
    "ErrorSeverity",
]
