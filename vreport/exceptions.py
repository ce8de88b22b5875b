"""Custom exception classes for vreport.

All fatal conditions of a run inherit from VReportError so the CLI can turn
them into a single error line and exit status 1. Patch and plugin failures
reported by the mod are not exceptions; they are recorded in the report.

Exception Hierarchy:
    VReportError (base)
    ├── ConfigError (invalid configuration)
    │   └── MissingEnvironmentError (required variable unset)
    ├── BundleError (bundle file unreadable)
    ├── LaunchError (browser or page failed to start)
    ├── BootstrapError (in-page setup signalled a fatal error)
    └── PatternMismatchError (tagged log line in an unknown format)
"""

from pathlib import Path
from typing import Any


class VReportError(Exception):
    """Base exception for all vreport errors.

    Attributes:
        message: Human-readable error description.
        detail: Technical details for debugging (optional).
    """

    def __init__(self, message: str, detail: str | None = None) -> None:
        self.message = message
        self.detail = detail
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a dictionary for JSON output."""
        result: dict[str, Any] = {
            "error": self.__class__.__name__,
            "message": self.message,
        }
        if self.detail:
            result["detail"] = self.detail
        return result


class ConfigError(VReportError):
    """Raised when the run configuration is invalid."""

    pass


class MissingEnvironmentError(ConfigError):
    """Raised when a required environment variable is not set."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Missing environment variable {name}")

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["variable"] = self.name
        return result


class BundleError(VReportError):
    """Raised when the prebuilt bundle cannot be read."""

    def __init__(self, path: Path, detail: str | None = None) -> None:
        self.path = path
        super().__init__(f"Cannot read bundle {path}", detail)


class LaunchError(VReportError):
    """Raised when the browser or its page cannot be started."""

    pass


class BootstrapError(VReportError):
    """Raised when the in-page bootstrap routine reports a fatal error."""

    pass


class PatternMismatchError(VReportError):
    """Raised when a tagged mod log line does not match its known format.

    The log phrasing is a fixed protocol, so a mismatch means the mod and the
    runner disagree and the report can no longer be trusted.
    """

    def __init__(self, tag: str, message: str) -> None:
        self.tag = tag
        self.log_message = message
        super().__init__(
            f"Unrecognized {tag} message",
            detail=message,
        )

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["tag"] = self.tag
        return result
