"""
SSE transport.

One transport per connected client. Messages posted by the client are pushed
into an in-memory stream read by the protocol server; messages the server
writes are drained by the client's open SSE response.
"""

from __future__ import annotations

import logging
from typing import Any, AsyncIterator, Dict
from uuid import uuid4

import anyio
from mcp import types
from mcp.shared.message import SessionMessage
from pydantic import ValidationError

from ..errors import InvalidMessage

logger = logging.getLogger(__name__)


class SseSessionTransport:
    """
    Pair of memory streams bridging HTTP and one protocol server.

    Attributes:
        session_id: random hex token identifying the session.
        endpoint: path the client must POST its messages to.
        read_stream / write_stream: the ends handed to ``Server.run``.
    """

    def __init__(self, endpoint: str):
        self.session_id = uuid4().hex
        self.endpoint = endpoint
        self._closed = False

        # client -> server
        self._read_stream_writer, self.read_stream = anyio.create_memory_object_stream(0)
        # server -> client
        self.write_stream, self._write_stream_reader = anyio.create_memory_object_stream(0)

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def endpoint_url(self) -> str:
        """The message-posting URL announced in the first SSE event."""
        return f"{self.endpoint}?sessionId={self.session_id}"

    async def handle_message(self, body: bytes) -> None:
        """
        Parse one JSON-RPC message and hand it to the protocol server.

        Raises:
            InvalidMessage: the body is not a JSON-RPC message.
            anyio.ClosedResourceError / anyio.BrokenResourceError: the
                transport was closed while delivering.
        """
        try:
            message = types.JSONRPCMessage.model_validate_json(body)
        except ValidationError as e:
            logger.debug("Rejected message for session %s: %s", self.session_id, e)
            raise InvalidMessage("Could not parse message") from e

        await self._read_stream_writer.send(SessionMessage(message))

    async def events(self) -> AsyncIterator[Dict[str, Any]]:
        """
        SSE events for the client, in ``sse_starlette`` dict form.

        Starts with the ``endpoint`` event, then one ``message`` event per
        outgoing JSON-RPC message until the transport is closed.
        """
        yield {"event": "endpoint", "data": self.endpoint_url}

        try:
            async with self._write_stream_reader:
                async for session_message in self._write_stream_reader:
                    yield {
                        "event": "message",
                        "data": session_message.message.model_dump_json(
                            by_alias=True, exclude_none=True
                        ),
                    }
        except anyio.ClosedResourceError:
            pass

    def close(self) -> None:
        """Close every stream end. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        # Closing the send sides first wakes any pending receivers with
        # EndOfStream.
        self._read_stream_writer.close()
        self.write_stream.close()
        self.read_stream.close()
        self._write_stream_reader.close()
