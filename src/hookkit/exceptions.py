"""Custom exceptions for HookKit."""

from typing import Any


class HookKitError(Exception):
    """Base exception for all HookKit errors."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.details = details or {}


class SourceSettingsError(HookKitError):
    """Raised when the bundled settings document is missing or malformed."""


class TargetSettingsError(HookKitError):
    """Raised when an existing target settings document cannot be merged into."""


class ConfigError(HookKitError):
    """Raised when an install profile is invalid."""
