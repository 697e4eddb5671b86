"""Sessions module."""

from .store import DEFAULT_TTL, ISessionManager, SessionStore, utcnow

__all__ = ["DEFAULT_TTL", "ISessionManager", "SessionStore", "utcnow"]
