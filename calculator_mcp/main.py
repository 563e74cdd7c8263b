"""
Server entry point.

    python -m calculator_mcp.main
    calculator-mcp            # console script

Environment:
    PORT           listening port (default 3000)
    HOST           bind address (default 0.0.0.0)
    WIDGET_DOMAIN  public origin embedded into widget HTML and CSP metadata
    ASSETS_DIR     built widget assets (auto-detected when unset)
    LOG_LEVEL      logging level (default INFO)
"""
import logging

import uvicorn

from . import config


def configure_logging(level: str = config.LOG_LEVEL):
    logging.basicConfig(
        level=level,
        format="[%(asctime)s] %(levelname)s %(name)s: %(message)s",
    )


def main():
    configure_logging()
    logger = logging.getLogger(__name__)
    logger.info("Starting Calculator MCP server on http://%s:%d", config.HOST, config.PORT)

    from .app import app

    uvicorn.run(app, host=config.HOST, port=config.PORT, log_level="warning")


if __name__ == "__main__":
    main()
