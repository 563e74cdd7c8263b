"""
Application configuration module.

Centralizes all configuration values and constants.
"""

import logging
import os
from pathlib import Path
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# Project paths
PROJECT_ROOT = Path(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
PACKAGE_DIR = Path(os.path.dirname(os.path.abspath(__file__)))

# Load environment variables from .env file
load_dotenv(os.path.join(PROJECT_ROOT, ".env"))

# Server configuration
DEFAULT_PORT = 3000
DEFAULT_HOST = "0.0.0.0"
SERVER_NAME = "calculator-mcp"
SERVER_VERSION = "1.0.0"

# MCP endpoints
SSE_PATH = "/mcp"
POST_PATH = "/mcp/messages"

# Widgets
DEFAULT_WIDGET_DOMAIN = "https://calculate-sum.zeabur.app"
WIDGET_MIME_TYPE = "text/html+skybridge"


def _parse_port(raw) -> int:
    """Parse PORT, falling back to the default for anything non-numeric."""
    if raw is None:
        return DEFAULT_PORT
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring invalid PORT value %r, using %d", raw, DEFAULT_PORT)
        return DEFAULT_PORT


def _resolve_assets_dir() -> Path:
    """
    Locate the built widget assets.

    An explicit ASSETS_DIR wins. Otherwise the first existing candidate is
    used: project root, current working directory (Docker), package dir.
    """
    override = os.environ.get("ASSETS_DIR")
    if override:
        return Path(override).resolve()

    candidates = [
        PROJECT_ROOT / "assets",
        Path.cwd() / "assets",
        PACKAGE_DIR / "assets",
    ]
    for candidate in candidates:
        if candidate.is_dir():
            return candidate.resolve()

    fallback = PROJECT_ROOT / "assets"
    logger.warning("Assets directory not found, using fallback: %s", fallback)
    return fallback


PORT = _parse_port(os.environ.get("PORT"))
HOST = os.environ.get("HOST", DEFAULT_HOST)
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()
WIDGET_DOMAIN = os.environ.get("WIDGET_DOMAIN") or DEFAULT_WIDGET_DOMAIN
ASSETS_DIR = _resolve_assets_dir()
