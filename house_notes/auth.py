"""
Session State.

``SessionManager`` is the one place that knows who is signed in.  It holds
the ``User`` and the hosted session tokens issued at sign-in; ``AuthService``
refreshes the tokens before account changes once the access token is
close to expiry.

Usage::

    session = SessionManager()
    session.start(User(id="abc-123", email="user@example.com"), tokens)
    if session.tokens_need_refresh():
        ...  # AuthService.ensure_fresh_session()
"""

from __future__ import annotations

import threading
from datetime import datetime, timedelta, timezone
from typing import Optional

from pydantic import BaseModel

from house_notes.models.user import User

# Tokens this close to expiry are treated as expired.
EXPIRY_LEEWAY: timedelta = timedelta(seconds=30)


class SessionTokens(BaseModel):
    """Access/refresh pair from the hosted auth service."""

    access_token: str
    refresh_token: str
    expires_at: datetime

    model_config = {"frozen": True}

    @classmethod
    def from_hosted(cls, session: object) -> "SessionTokens":
        """Build from a hosted ``Session`` (``expires_at`` in epoch seconds)."""
        return cls(
            access_token=getattr(session, "access_token"),
            refresh_token=getattr(session, "refresh_token"),
            expires_at=datetime.fromtimestamp(getattr(session, "expires_at"), tz=timezone.utc),
        )

    def expired(self, now: Optional[datetime] = None) -> bool:
        now = now or datetime.now(timezone.utc)
        return now >= self.expires_at - EXPIRY_LEEWAY


class SessionManager:
    """Thread-safe holder for the signed-in user and their tokens.

    A single instance is created in the composition root and shared by
    every service.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._user: Optional[User] = None
        self._tokens: Optional[SessionTokens] = None

    def start(self, user: User, tokens: Optional[SessionTokens] = None) -> None:
        """Begin a session for *user*.

        *tokens* is ``None`` when sign-in succeeded without a hosted
        session (e.g. email confirmation pending).
        """
        with self._lock:
            self._user = user
            self._tokens = tokens

    def replace_tokens(self, tokens: SessionTokens) -> None:
        with self._lock:
            self._tokens = tokens

    def get_current_user(self) -> User:
        """Return the signed-in user.

        Raises:
            RuntimeError: Nobody is signed in.
        """
        with self._lock:
            if self._user is None:
                raise RuntimeError("No user is currently authenticated. Login required.")
            return self._user

    @property
    def tokens(self) -> Optional[SessionTokens]:
        with self._lock:
            return self._tokens

    def tokens_need_refresh(self, now: Optional[datetime] = None) -> bool:
        """``True`` when a hosted session exists and its access token is stale."""
        with self._lock:
            return self._tokens is not None and self._tokens.expired(now)

    @property
    def is_authenticated(self) -> bool:
        with self._lock:
            return self._user is not None

    def clear(self) -> None:
        """End the session."""
        with self._lock:
            self._user = None
            self._tokens = None
