"""
Input validation for the upload workflow.

This module checks the local source file and the workflow configuration
before any request is sent to the tiling service.
"""

from pathlib import Path
from typing import Any


class ValidationException(Exception):
    """Base exception for validation errors."""

    def __init__(self, message: str, field: str | None = None, code: str | None = None):
        self.message = message
        self.field = field
        self.code = code
        super().__init__(message)


class FileValidationException(ValidationException):
    """Exception for file validation errors."""

    pass


class ConfigValidationException(ValidationException):
    """Exception for configuration validation errors."""

    pass


class ErrorMessages:
    """User-friendly error messages."""

    FILE_NOT_FOUND = "Input file not found: {path}"
    NOT_A_FILE = "Input path is not a file: {path}"
    FILE_EMPTY = "Input file is empty: {path}"
    TOKEN_MISSING = "An ion access token is required (set ION_ACCESS_TOKEN)"
    NAME_MISSING = "Asset name cannot be empty"
    INVALID_INTERVAL = "Polling interval must be greater than zero"
    INVALID_LIMIT = "{field} must be greater than zero when set"


class FileValidator:
    """Validator for the source data file."""

    @staticmethod
    def validate_input_file(file_path: str | Path) -> Path:
        """
        Validate the file that will be uploaded.

        Args:
            file_path: Path to the local file

        Returns:
            Path: The validated path

        Raises:
            FileValidationException: If the file is missing, not a regular file or empty
        """
        path = Path(file_path)

        if not path.exists():
            raise FileValidationException(
                ErrorMessages.FILE_NOT_FOUND.format(path=path), field="input_path", code="FILE_NOT_FOUND"
            )

        if not path.is_file():
            raise FileValidationException(
                ErrorMessages.NOT_A_FILE.format(path=path), field="input_path", code="NOT_A_FILE"
            )

        if path.stat().st_size == 0:
            raise FileValidationException(
                ErrorMessages.FILE_EMPTY.format(path=path), field="input_path", code="FILE_EMPTY"
            )

        return path

    @staticmethod
    def format_file_size(size_bytes: int) -> str:
        """Format file size in human-readable format."""
        size = float(size_bytes)
        for unit in ["B", "KB", "MB", "GB"]:
            if size < 1024.0:
                return f"{size:.1f} {unit}"
            size /= 1024.0
        return f"{size:.1f} TB"


class ConfigValidator:
    """Validator for workflow configuration values."""

    @staticmethod
    def validate_access_token(token: str | None) -> str:
        if not token or not token.strip():
            raise ConfigValidationException(ErrorMessages.TOKEN_MISSING, field="access_token", code="TOKEN_MISSING")
        return token.strip()

    @staticmethod
    def validate_asset_name(name: str | None) -> str:
        if not name or not name.strip():
            raise ConfigValidationException(ErrorMessages.NAME_MISSING, field="asset_name", code="NAME_MISSING")
        return name.strip()

    @staticmethod
    def validate_positive(value: Any, field: str, optional: bool = False) -> Any:
        """Reject zero or negative numbers; ``None`` passes when ``optional``."""
        if value is None and optional:
            return value
        if value is None or value <= 0:
            if field == "poll_interval":
                raise ConfigValidationException(ErrorMessages.INVALID_INTERVAL, field=field, code="INVALID_VALUE")
            raise ConfigValidationException(
                ErrorMessages.INVALID_LIMIT.format(field=field), field=field, code="INVALID_VALUE"
            )
        return value
