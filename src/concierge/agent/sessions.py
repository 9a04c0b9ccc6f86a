"""Table of live chat sessions keyed by opaque tokens."""

from __future__ import annotations

import asyncio
import logging
import time
import uuid
from collections import OrderedDict
from collections.abc import Callable
from dataclasses import dataclass, field

from concierge.agent.conversation import Conversation

logger = logging.getLogger(__name__)


class SessionNotFoundError(KeyError):
    """No live session has the given token."""


@dataclass
class Session:
    """One user's conversation plus the lock that serializes its turns."""

    token: str
    conversation: Conversation
    last_used: float
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)


class SessionStore:
    """Creates, looks up and evicts sessions.

    Sessions idle for longer than ``ttl`` seconds are pruned, and creating a
    session beyond ``max_sessions`` evicts the least recently used one.
    """

    def __init__(
        self,
        system_prompt: str,
        max_sessions: int = 100,
        ttl: float = 3600,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.system_prompt = system_prompt
        self.max_sessions = max_sessions
        self.ttl = ttl
        self._clock = clock
        self._sessions: OrderedDict[str, Session] = OrderedDict()

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, token: object) -> bool:
        return token in self._sessions

    def create(self) -> Session:
        """Start a new session with a fresh token."""
        self.prune()
        while len(self._sessions) >= self.max_sessions:
            evicted, _ = self._sessions.popitem(last=False)
            logger.info("Session limit reached, evicted %s", evicted)

        token = uuid.uuid4().hex
        session = Session(
            token=token,
            conversation=Conversation(self.system_prompt),
            last_used=self._clock(),
        )
        self._sessions[token] = session
        logger.debug("Created session %s", token)
        return session

    def get(self, token: str) -> Session:
        """Look up a live session and mark it used.

        Raises:
            SessionNotFoundError: If the token is unknown or expired
        """
        self.prune()
        try:
            session = self._sessions[token]
        except KeyError:
            raise SessionNotFoundError(token) from None
        session.last_used = self._clock()
        self._sessions.move_to_end(token)
        return session

    def get_or_create(self, token: str | None) -> Session:
        """Return the session for ``token``, or a new one if there is none."""
        if token:
            try:
                return self.get(token)
            except SessionNotFoundError:
                logger.debug("Unknown session %s, starting a new one", token)
        return self.create()

    def reset(self, token: str) -> Session:
        """Truncate a session's history back to the system prompt.

        Raises:
            SessionNotFoundError: If the token is unknown or expired
        """
        session = self.get(token)
        session.conversation.reset()
        return session

    def evict(self, token: str) -> bool:
        """Remove a session. Returns False if it did not exist."""
        return self._sessions.pop(token, None) is not None

    def prune(self) -> int:
        """Drop sessions idle for longer than the TTL.

        Returns:
            Number of sessions removed
        """
        cutoff = self._clock() - self.ttl
        expired = [token for token, s in self._sessions.items() if s.last_used < cutoff]
        for token in expired:
            del self._sessions[token]
        if expired:
            logger.info("Pruned %d idle sessions", len(expired))
        return len(expired)
