"""
FastAPI application factory.

Creates and configures the FastAPI application instance.
"""
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import config
from .api.http import router as http_router
from .api.mcp import router as mcp_router
from .api.middleware import RequestMiddleware
from .core.lifecycle import lifespan
from .core.sessions import SessionManager
from .errors import CalculatorError, InvalidInput
from .services.assets import AssetStore
from .widgets import WidgetCatalog, WidgetRegistry

CORS_HEADERS = {"Access-Control-Allow-Origin": "*"}


async def calculator_error_handler(request: Request, exc: CalculatorError):
    """Render a client-facing failure with its HTTP status."""
    if isinstance(exc, InvalidInput):
        return JSONResponse(
            {"error": exc.message}, status_code=exc.status_code, headers=CORS_HEADERS
        )
    return PlainTextResponse(exc.message, status_code=exc.status_code, headers=CORS_HEADERS)


async def not_found_handler(request: Request, exc: StarletteHTTPException):
    """Unknown paths and unsupported methods on known paths are both 404."""
    if exc.status_code in (404, 405):
        return PlainTextResponse("Not Found", status_code=404, headers=CORS_HEADERS)
    return PlainTextResponse(
        str(exc.detail), status_code=exc.status_code, headers=CORS_HEADERS
    )


def create_app(
    assets_dir: Optional[Path] = None,
    widget_domain: Optional[str] = None,
    project_root: Optional[Path] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        assets_dir: built widget assets (defaults to config.ASSETS_DIR)
        widget_domain: public origin of the widgets (defaults to config.WIDGET_DOMAIN)
        project_root: where index.html and .well-known live

    Returns:
        Configured FastAPI instance
    """
    assets_dir = Path(assets_dir or config.ASSETS_DIR)
    widget_domain = widget_domain or config.WIDGET_DOMAIN

    app = FastAPI(
        title="Calculator MCP",
        description="Calculator ChatGPT App served over MCP + SSE",
        version=config.SERVER_VERSION,
        lifespan=lifespan,
    )

    registry = WidgetRegistry.load(assets_dir, widget_domain)
    catalog = WidgetCatalog(registry)
    app.state.catalog = catalog
    app.state.sessions = SessionManager(catalog, config.POST_PATH)
    app.state.assets = AssetStore(assets_dir)
    app.state.project_root = str(project_root or config.PROJECT_ROOT)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Accept"],
    )
    # Added last so it wraps CORS and sees every request first
    app.add_middleware(RequestMiddleware)

    app.add_exception_handler(CalculatorError, calculator_error_handler)
    app.add_exception_handler(StarletteHTTPException, not_found_handler)

    # MCP transport endpoints (GET /mcp, POST /mcp/messages)
    app.include_router(mcp_router)

    # REST routes (/calculate, /assets/*, /, /api/health)
    app.include_router(http_router)

    return app


# Create the app instance for uvicorn
app = create_app()
