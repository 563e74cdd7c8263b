"""
Request middleware.

A plain ASGI middleware (rather than ``BaseHTTPMiddleware``) so long-lived
SSE responses stream through untouched. It:
- answers every OPTIONS request with the CORS pre-flight response
- logs ``METHOD path [status] (Nms)`` once per request
- turns unhandled exceptions into a 500 when nothing was sent yet
"""

import logging
import time

from starlette.types import ASGIApp, Message, Receive, Scope, Send

logger = logging.getLogger(__name__)

PREFLIGHT_HEADERS = [
    (b"access-control-allow-origin", b"*"),
    (b"access-control-allow-methods", b"GET, POST, OPTIONS"),
    (b"access-control-allow-headers", b"Content-Type, Accept"),
    (b"access-control-max-age", b"86400"),
]


class RequestMiddleware:
    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        method = scope.get("method", "UNKNOWN")
        path = scope.get("path", "unknown")
        start = time.monotonic()
        status = {"code": None}

        if method == "OPTIONS":
            await send({"type": "http.response.start", "status": 204, "headers": PREFLIGHT_HEADERS})
            await send({"type": "http.response.body", "body": b""})
            self._log(method, path, 204, start)
            return

        async def send_wrapper(message: Message):
            if message["type"] == "http.response.start":
                status["code"] = message["status"]
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        except Exception:
            logger.exception("Unhandled error processing %s %s", method, path)
            if status["code"] is None:
                status["code"] = 500
                await send({
                    "type": "http.response.start",
                    "status": 500,
                    "headers": [(b"content-type", b"text/plain; charset=utf-8")],
                })
                await send({"type": "http.response.body", "body": b"Internal Server Error"})
        finally:
            self._log(method, path, status["code"], start)

    @staticmethod
    def _log(method: str, path: str, status_code, start: float):
        duration_ms = int((time.monotonic() - start) * 1000)
        logger.info("%s %s [%s] (%dms)", method, path, status_code or "-", duration_ms)
