"""vreport - headless end-to-end test runner for Vencord builds."""

from vreport.classify import Collector, ConsoleEvent, classify
from vreport.exceptions import (
    BootstrapError,
    BundleError,
    ConfigError,
    LaunchError,
    MissingEnvironmentError,
    PatternMismatchError,
    VReportError,
)
from vreport.report import BadPatch, BadStart, PatchFailure, Report, render_markdown
from vreport.version import __version__

__all__ = [
    "__version__",
    "BadPatch",
    "BadStart",
    "PatchFailure",
    "Report",
    "render_markdown",
    "Collector",
    "ConsoleEvent",
    "classify",
    "VReportError",
    "ConfigError",
    "MissingEnvironmentError",
    "BundleError",
    "LaunchError",
    "BootstrapError",
    "PatternMismatchError",
]
