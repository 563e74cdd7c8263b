"""
Application lifecycle management.

Startup banner, assets check, and session cleanup on shutdown.
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from ..config import POST_PATH, SSE_PATH

logger = logging.getLogger(__name__)


def log_startup_banner(app: FastAPI):
    """Log the endpoints, the available tools, and the state of the assets dir."""
    catalog = app.state.catalog
    assets = app.state.assets

    logger.info("Calculator MCP server ready")
    logger.info("  SSE stream:     GET  %s", SSE_PATH)
    logger.info("  Message post:   POST %s?sessionId=...", POST_PATH)
    logger.info("  Static assets:  GET  /assets/*")
    logger.info("  Available tools: %s", ", ".join(catalog.registry.ids()))

    if assets.exists():
        logger.info("Assets directory found with %d files", len(assets.list_files()))
    else:
        logger.warning("Assets directory not found at: %s", assets.root)
        logger.warning("  Build the widgets to populate it")


async def cleanup_resources(app: FastAPI):
    """Close every open MCP session."""
    sessions = app.state.sessions
    if len(sessions):
        logger.info("Closing %d open session(s)...", len(sessions))
    await sessions.shutdown()
    logger.info("Cleanup completed")


@asynccontextmanager
async def lifespan(app: FastAPI):
    log_startup_banner(app)
    try:
        yield
    finally:
        await cleanup_resources(app)
