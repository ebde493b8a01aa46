# ABOUTME: Exceptions for multi-page collection sessions.
# ABOUTME: Abort exceptions carry the partial SessionResult gathered before the abort.

from linkedin_relay.errors import LinkedInRelayError
from linkedin_relay.models.session import SessionResult
from linkedin_relay.pacing.policy import BlockSignal


class SessionError(LinkedInRelayError):
    """Base exception for collection session errors."""

    pass


class SessionInProgressError(SessionError):
    """Raised when a session is started while another one is running."""

    pass


class SessionAbortedError(SessionError):
    """A session stopped early.

    Attributes:
        partial: Everything collected before the abort.
    """

    def __init__(self, message: str, partial: SessionResult) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable description of the error.
            partial: The partial session result.
        """
        super().__init__(message)
        self.partial = partial


class BlockedError(SessionAbortedError):
    """The page showed an anti-automation signal; the session stopped."""

    def __init__(self, message: str, partial: SessionResult, signal: BlockSignal) -> None:
        super().__init__(message, partial)
        self.signal = signal


class SessionTimeoutError(SessionAbortedError):
    """The session ran past its wall-clock limit."""

    pass
