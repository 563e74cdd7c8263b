"""
HTTP REST API endpoints.

Use for:
- Direct widget-to-backend calculations (no MCP round trip)
- Serving the built widget assets
- The landing page and the OpenAI domain verification file
- Health checks
"""

import json
import logging
import os

from fastapi import APIRouter, Request
from fastapi.responses import FileResponse, JSONResponse
from pydantic import ValidationError

from ..errors import DivideByZero, InvalidArguments, InvalidInput, NotFound
from ..services.assets import content_type_for
from ..services.calculator import CalculateRequest, compute

logger = logging.getLogger(__name__)

router = APIRouter()

CORS_HEADERS = {"Access-Control-Allow-Origin": "*"}

ASSET_HEADERS = {
    **CORS_HEADERS,
    "Access-Control-Allow-Methods": "GET, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
    "Cache-Control": "public, max-age=3600",
}


# ============================================
# Health Check
# ============================================


@router.get("/api/health")
async def health_check(request: Request):
    """Check if the server is running."""
    return {"status": "healthy", "sessions": len(request.app.state.sessions)}


# ============================================
# Direct calculation API
# ============================================


def _reject_constant(name: str):
    # NaN, Infinity and -Infinity are not JSON
    raise ValueError(f"Invalid JSON constant: {name}")


@router.post("/calculate")
async def calculate(request: Request):
    """
    Compute ``a <operation> b`` for a widget without going through MCP.

    Uses the same arithmetic as the ``tools/call`` handler, so results and
    divide-by-zero handling match exactly. ``operation`` defaults to add.
    """
    body = await request.body()
    try:
        payload = json.loads(body, parse_constant=_reject_constant)
    except (ValueError, UnicodeDecodeError):
        logger.warning("Failed to parse calculate request body")
        raise InvalidInput("Invalid JSON")

    if not isinstance(payload, dict):
        raise InvalidInput("Invalid inputs")

    logger.info("Calculate request: a=%r, b=%r", payload.get("a"), payload.get("b"))
    try:
        parsed = CalculateRequest.model_validate(payload)
    except ValidationError:
        logger.warning(
            "Invalid inputs: a=%r (%s), b=%r (%s)",
            payload.get("a"), type(payload.get("a")).__name__,
            payload.get("b"), type(payload.get("b")).__name__,
        )
        raise InvalidInput("Invalid inputs")

    try:
        calculation = compute(parsed.operation, parsed.a, parsed.b)
    except (DivideByZero, InvalidArguments) as e:
        raise InvalidInput(e.message) from e

    logger.info("Calculate result: %s", calculation.result)
    return JSONResponse({"result": calculation.result}, headers=CORS_HEADERS)


# ============================================
# Static files
# ============================================


@router.get("/assets/{file_path:path}")
async def serve_asset(file_path: str, request: Request):
    """Serve a built widget asset from the assets directory."""
    full_path = request.app.state.assets.resolve(file_path)
    logger.debug("Serving %s from: %s", file_path, full_path)
    return FileResponse(
        full_path,
        media_type=content_type_for(file_path),
        headers=ASSET_HEADERS,
    )


@router.get("/")
async def index(request: Request):
    """Landing page from the project root."""
    html_path = os.path.join(request.app.state.project_root, "index.html")
    if not os.path.isfile(html_path):
        raise NotFound("index.html not found")
    return FileResponse(html_path, media_type="text/html", headers=CORS_HEADERS)


@router.get("/.well-known/openai-apps-challenge")
async def openai_apps_challenge(request: Request):
    """Domain verification file for OpenAI Apps."""
    verification_path = os.path.join(
        request.app.state.project_root, ".well-known", "openai-apps-challenge"
    )
    if not os.path.isfile(verification_path):
        raise NotFound("Verification file not found")
    return FileResponse(verification_path, media_type="text/plain", headers=CORS_HEADERS)
