"""
Conversation session store - paging state for multi-step answers.

One session per (channel, user). Sessions expire after an idle timeout,
both lazily on access and through a periodic sweep.
"""
from __future__ import annotations

import asyncio
import logging
import time
from typing import Callable

from core.types import ConversationSession, StepResult, StepStatus

logger = logging.getLogger("smartbot.sessions")

DEFAULT_IDLE_TIMEOUT = 30 * 60.0
DEFAULT_SWEEP_INTERVAL = 5 * 60.0


def session_key(channel_id: int, user_id: int) -> str:
    """Composite key for a conversation."""
    return f"{channel_id}:{user_id}"


class ConversationStore:
    """
    In-memory store of walkthrough sessions.

    Every operation runs under one asyncio.Lock, so concurrent advances for
    the same key are serialized. State is process-local and is lost on restart.
    """

    def __init__(
        self,
        idle_timeout: float = DEFAULT_IDLE_TIMEOUT,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.idle_timeout = float(idle_timeout)
        self._clock = clock
        self._sessions: dict[str, ConversationSession] = {}
        self._lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self._sessions)

    def _is_expired(self, session: ConversationSession, now: float) -> bool:
        return now - session.last_touched > self.idle_timeout

    async def put(self, key: str, steps: list[str], original_query: str) -> ConversationSession:
        """Create or overwrite the session for key, starting at step 0."""
        if not steps:
            raise ValueError("A session needs at least one step")
        async with self._lock:
            session = ConversationSession(
                steps=list(steps),
                original_query=original_query,
                last_touched=self._clock(),
            )
            self._sessions[key] = session
        logger.debug("Session %s created with %d steps", key, len(steps))
        return session

    async def advance(self, key: str) -> StepResult:
        """
        Move the session for key to its next step.

        The session is removed once its last step is returned, or when it
        has been idle longer than the timeout.
        """
        async with self._lock:
            session = self._sessions.get(key)
            if session is None:
                return StepResult(StepStatus.NOT_FOUND)

            now = self._clock()
            if self._is_expired(session, now):
                self._sessions.pop(key, None)
                logger.debug("Session %s expired on access", key)
                return StepResult(StepStatus.EXPIRED)

            if not session.has_more:
                self._sessions.pop(key, None)
                return StepResult(StepStatus.NOT_FOUND)

            session.index += 1
            session.last_touched = now
            has_more = session.has_more
            if not has_more:
                self._sessions.pop(key, None)
            return StepResult(StepStatus.OK, text=session.current, has_more=has_more)

    async def sweep(self) -> int:
        """Remove every expired session. Returns how many were removed."""
        async with self._lock:
            now = self._clock()
            expired = [key for key, session in self._sessions.items() if self._is_expired(session, now)]
            for key in expired:
                self._sessions.pop(key, None)
        if expired:
            logger.debug("Swept %d expired sessions", len(expired))
        return len(expired)

    async def clear(self) -> None:
        async with self._lock:
            self._sessions.clear()
