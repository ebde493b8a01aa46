# ABOUTME: Session package for multi-page connection collection.
# ABOUTME: Exports SessionCollector and its abort exceptions.

from linkedin_relay.session.collector import SessionCollector
from linkedin_relay.session.exceptions import (
    BlockedError,
    SessionAbortedError,
    SessionError,
    SessionInProgressError,
    SessionTimeoutError,
)

__all__ = [
    "BlockedError",
    "SessionAbortedError",
    "SessionCollector",
    "SessionError",
    "SessionInProgressError",
    "SessionTimeoutError",
]
