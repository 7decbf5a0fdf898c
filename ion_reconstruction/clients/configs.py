"""
Configuration for the ion REST client.
"""

from dataclasses import dataclass

DEFAULT_API_BASE = "https://api.ion.cesium.com"


@dataclass
class IonClientConfig:
    """Configuration for talking to the ion REST API."""

    access_token: str
    base_url: str = DEFAULT_API_BASE
    timeout_seconds: int = 300

    @property
    def auth_headers(self) -> dict[str, str]:
        """Headers sent with every authenticated request."""
        return {"Authorization": f"Bearer {self.access_token}", "Content-Type": "application/json"}

    def url(self, path: str) -> str:
        return f"{self.base_url.rstrip('/')}/{path.lstrip('/')}"
