"""Configuration for the vreport test runner."""

import logging
import os
import sys
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from vreport.exceptions import MissingEnvironmentError

# Required environment variables, checked in this order
TOKEN_ENV = "DISCORD_TOKEN"
CHROMIUM_ENV = "CHROMIUM_BIN"
REQUIRED_ENV = (TOKEN_ENV, CHROMIUM_ENV)

# Optional overrides
BUNDLE_ENV = "VREPORT_BUNDLE"
LOGIN_URL_ENV = "VREPORT_LOGIN_URL"

DEFAULT_BUNDLE = Path("dist") / "browser.js"
DEFAULT_LOGIN_URL = "https://discord.com/login"

# Desktop Chrome UA so the client does not take its platform-detection fallbacks
USER_AGENT = (
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/91.0.4472.114 Safari/537.36"
)

# Console protocol shared with bootstrap.js. Must match byte for byte.
DONE_SIGNAL = "PUPPETEER_TEST_DONE_SIGNAL"
FATAL_SIGNAL = "PUPPETEER_TEST_FATAL_SIGNAL"
VENCORD_TAG = "[Vencord]"
DEBUG_TAG = "[PUP_DEBUG]"
WEBPACK_TAG = "WebpackInterceptor:"
PLUGIN_MANAGER_TAG = "PluginManager:"

# Logging configuration
# Valid values: DEBUG, INFO, WARNING, ERROR, CRITICAL
LOG_LEVEL_STR = os.environ.get("VREPORT_LOG_LEVEL", "INFO").upper()
LOG_LEVEL = getattr(logging, LOG_LEVEL_STR, logging.INFO)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


@dataclass
class Settings:
    """Resolved settings for a single run."""

    token: str
    chromium_bin: Path
    bundle_path: Path = DEFAULT_BUNDLE
    login_url: str = DEFAULT_LOGIN_URL
    headless: bool = True


def load_settings(
    environ: Mapping[str, str] | None = None,
    bundle_path: Path | None = None,
    login_url: str | None = None,
    headless: bool = True,
) -> Settings:
    """Build run settings from the environment.

    Explicit arguments win over the optional environment overrides.

    Raises:
        MissingEnvironmentError: If a required variable is unset or empty.
    """
    env = os.environ if environ is None else environ

    for name in REQUIRED_ENV:
        if not env.get(name):
            raise MissingEnvironmentError(name)

    if bundle_path is None:
        bundle_path = Path(env.get(BUNDLE_ENV) or DEFAULT_BUNDLE)

    return Settings(
        token=env[TOKEN_ENV],
        chromium_bin=Path(env[CHROMIUM_ENV]),
        bundle_path=bundle_path,
        login_url=login_url or env.get(LOGIN_URL_ENV) or DEFAULT_LOGIN_URL,
        headless=headless,
    )


def setup_logging() -> logging.Logger:
    """Configure logging for vreport.

    Everything goes to stderr; stdout is reserved for the report.

    Returns:
        The vreport package logger.
    """
    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    logger = logging.getLogger("vreport")
    logger.setLevel(LOG_LEVEL)

    # Avoid duplicate handlers if setup is called multiple times
    if logger.handlers:
        return logger

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(LOG_LEVEL)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    logger.propagate = False

    return logger
