"""
Core application components.
"""
from .sessions import Session, SessionManager, SessionState
from .transport import SseSessionTransport
from .lifecycle import cleanup_resources, lifespan

__all__ = ['Session', 'SessionManager', 'SessionState', 'SseSessionTransport', 'cleanup_resources', 'lifespan']
