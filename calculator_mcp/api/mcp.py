"""
MCP over SSE endpoints.

GET  /mcp                         open an SSE stream (one session per stream)
POST /mcp/messages?sessionId=...  deliver a JSON-RPC message to a session
"""

import logging

from fastapi import APIRouter, Request
from fastapi.responses import PlainTextResponse
from sse_starlette.sse import EventSourceResponse

from ..config import POST_PATH, SSE_PATH
from ..core.sessions import SessionManager
from ..errors import MissingSessionId

logger = logging.getLogger(__name__)

router = APIRouter()

CORS_HEADERS = {"Access-Control-Allow-Origin": "*"}


def _sessions(request: Request) -> SessionManager:
    return request.app.state.sessions


@router.get(SSE_PATH)
async def open_sse_stream(request: Request):
    """
    Open a session and stream its protocol events.

    The first event announces the message-posting URL (with the session id).
    The session is closed as soon as the stream ends, whether the client
    disconnected or the transport failed.
    """
    sessions = _sessions(request)
    session = await sessions.open()

    async def event_stream():
        try:
            async for event in session.transport.events():
                yield event
        finally:
            sessions.close(session.session_id)

    return EventSourceResponse(event_stream(), headers=CORS_HEADERS)


@router.post(POST_PATH)
async def post_message(request: Request):
    """Forward one client message; the reply travels on the SSE stream."""
    session_id = request.query_params.get("sessionId")
    logger.debug("Processing MCP message for session: %s", session_id or "none")
    if not session_id:
        raise MissingSessionId()

    body = await request.body()
    await _sessions(request).dispatch(session_id, body)
    return PlainTextResponse(
        "Accepted",
        status_code=202,
        headers={**CORS_HEADERS, "Access-Control-Allow-Headers": "content-type"},
    )
