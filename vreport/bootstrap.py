"""Builds the script injected into the page before any of its own code runs."""

import json
import logging
from pathlib import Path

from vreport.exceptions import BundleError

logger = logging.getLogger(__name__)

BOOTSTRAP_FILE = Path(__file__).parent / "bootstrap.js"


def bootstrap_source() -> str:
    """Return the source of the in-page bootstrap routine."""
    return BOOTSTRAP_FILE.read_text(encoding="utf-8").strip()


def load_bundle(path: Path) -> str:
    """Read the prebuilt mod bundle.

    Raises:
        BundleError: If the file does not exist or cannot be decoded.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise BundleError(path, detail=str(e)) from e

    logger.debug("Loaded bundle %s (%d chars)", path, len(text))
    return text


def build_init_script(bundle: str, token: str) -> str:
    """Concatenate the bundle and the bootstrap call.

    The bundle comes first so the ``Vencord`` global exists when the
    bootstrap runs. The token is embedded as a JSON string literal.
    """
    return f"""
{bundle}

;({bootstrap_source()})({json.dumps(token)});
"""
