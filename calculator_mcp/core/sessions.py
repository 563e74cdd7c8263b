"""
MCP session management.

Tracks one live transport + protocol server per connected SSE client.
"""

from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import Dict, List, Optional, Set

import anyio
from mcp.server.lowlevel import Server

from ..errors import TransportEstablishmentFailure, UnknownSession
from ..mcp_integration.server import create_calculator_server
from ..widgets.catalog import WidgetCatalog
from .transport import SseSessionTransport

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    CONNECTING = "connecting"
    OPEN = "open"
    CLOSED = "closed"


class Session:
    """
    State bound to one open SSE connection.

    Owns its transport and its protocol server exclusively; nothing is
    shared with other sessions.
    """

    def __init__(self, server: Server, transport: SseSessionTransport):
        self.session_id = transport.session_id
        self.server = server
        self.transport = transport
        self.state = SessionState.CONNECTING
        self._task: Optional[asyncio.Task] = None

    @property
    def task(self) -> Optional[asyncio.Task]:
        return self._task

    def start(self) -> asyncio.Task:
        """Run the protocol server over the transport in a background task."""
        self._task = asyncio.create_task(
            self._serve(), name=f"mcp-session-{self.session_id}"
        )
        self.state = SessionState.OPEN
        return self._task

    async def _serve(self):
        await self.server.run(
            self.transport.read_stream,
            self.transport.write_stream,
            self.server.create_initialization_options(),
        )

    def close(self):
        """Close the transport and stop the server. Idempotent."""
        if self.state is SessionState.CLOSED:
            return
        self.state = SessionState.CLOSED
        self.transport.close()
        if self._task is not None and not self._task.done():
            self._task.cancel()


class SessionManager:
    """
    Session table keyed by session id.

    All mutations (insert in ``open``, delete in ``close``) happen without
    an intervening ``await``, so on a single event loop a ``dispatch`` either
    sees a live session or a miss, never a half-removed one.
    """

    def __init__(self, catalog: WidgetCatalog, message_path: str):
        self.catalog = catalog
        self.message_path = message_path
        self._sessions: Dict[str, Session] = {}
        # server tasks still running, closed sessions included
        self._tasks: Set[asyncio.Task] = set()

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._sessions

    def get(self, session_id: str) -> Optional[Session]:
        return self._sessions.get(session_id)

    def session_ids(self) -> List[str]:
        return list(self._sessions)

    async def open(self) -> Session:
        """
        Create and register a session for a new SSE connection.

        Raises:
            TransportEstablishmentFailure: the protocol server could not be
                started; nothing is left in the table.
        """
        server = create_calculator_server(self.catalog)
        transport = SseSessionTransport(self.message_path)
        session = Session(server, transport)
        session_id = session.session_id

        if session_id in self._sessions:
            # uuid4 collision; refuse rather than replace a live session
            transport.close()
            raise TransportEstablishmentFailure()

        self._sessions[session_id] = session
        try:
            task = session.start()
        except Exception as e:
            self._sessions.pop(session_id, None)
            session.close()
            logger.error("Failed to start SSE session %s: %s", session_id, e)
            raise TransportEstablishmentFailure() from e

        self._tasks.add(task)
        task.add_done_callback(lambda t: self._on_server_exit(session_id, t))
        logger.info("New SSE session: %s", session_id)
        return session

    async def dispatch(self, session_id: str, body: bytes) -> None:
        """
        Deliver one posted message to the session's protocol server.

        Raises:
            UnknownSession: no open session has this id.
            InvalidMessage: the body is not a JSON-RPC message.
        """
        session = self._sessions.get(session_id)
        if session is None or session.state is not SessionState.OPEN:
            raise UnknownSession(session_id)

        try:
            await session.transport.handle_message(body)
        except (anyio.ClosedResourceError, anyio.BrokenResourceError) as e:
            # closed between the lookup and the delivery
            raise UnknownSession(session_id) from e

    def close(self, session_id: str) -> bool:
        """
        Remove a session and release its server. Safe to repeat.

        Returns True if a session was removed.
        """
        session = self._sessions.pop(session_id, None)
        if session is None:
            return False
        session.close()
        logger.info("SSE session closed: %s", session_id)
        return True

    async def shutdown(self):
        """Close every session and wait for their servers to stop."""
        for session_id in self.session_ids():
            self.close(session_id)
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)

    def _on_server_exit(self, session_id: str, task: asyncio.Task):
        self._tasks.discard(task)
        error = None if task.cancelled() else task.exception()
        session = self._sessions.get(session_id)
        if error is not None and session is not None and session.state is SessionState.OPEN:
            logger.error(
                "SSE transport error for session %s",
                session_id,
                exc_info=(type(error), error, error.__traceback__),
            )
        self.close(session_id)
