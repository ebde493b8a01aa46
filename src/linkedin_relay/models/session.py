# ABOUTME: In-memory state for one multi-page collection session and its result.
# ABOUTME: Sessions are never persisted; a SessionResult is handed back to the caller.

import time
from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, Field

from linkedin_relay.models.connection import ConnectionRecord, SourceProfile


class SessionStatus(str, Enum):
    """Lifecycle of a collection session."""

    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    ABORTED_TIMEOUT = "aborted_timeout"
    ABORTED_BLOCKED = "aborted_blocked"
    ABORTED_ERROR = "aborted_error"


class SessionResult(BaseModel):
    """What a session produced, whether it completed or was aborted."""

    source: SourceProfile
    connections: list[ConnectionRecord] = Field(default_factory=list)
    pages_processed: int = 0
    duration_ms: int = 0
    status: SessionStatus = SessionStatus.COMPLETED
    error: str | None = None
    started_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @property
    def is_partial(self) -> bool:
        """True when the session ended before running out of pages."""
        return self.status is not SessionStatus.COMPLETED


class SessionState(BaseModel):
    """Mutable state of the running session."""

    source: SourceProfile
    started_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    started_monotonic: float = Field(default_factory=time.monotonic)
    connections: list[ConnectionRecord] = Field(default_factory=list)
    pages_processed: int = 0
    status: SessionStatus = SessionStatus.RUNNING

    def to_result(
        self,
        now: float,
        status: SessionStatus,
        error: str | None = None,
    ) -> SessionResult:
        """Freeze the state into a SessionResult.

        Args:
            now: Current monotonic time in seconds.
            status: Terminal status of the session.
            error: Optional error message for aborted sessions.

        Returns:
            SessionResult holding a copy of the accumulated connections.
        """
        return SessionResult(
            source=self.source,
            connections=list(self.connections),
            pages_processed=self.pages_processed,
            duration_ms=max(0, int((now - self.started_monotonic) * 1000)),
            status=status,
            error=error,
            started_at=self.started_at,
        )
