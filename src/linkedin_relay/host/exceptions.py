# ABOUTME: Exceptions raised by page hosts (browser or snapshot backed).
# ABOUTME: NavigationError covers a next-page click that could not be performed.

from linkedin_relay.errors import LinkedInRelayError


class HostError(LinkedInRelayError):
    """Base exception for page host failures."""

    pass


class NavigationError(HostError):
    """Raised when a navigation action (e.g. clicking "Next") fails."""

    def __init__(self, message: str, selector: str | None = None) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable description of the error.
            selector: The selector that could not be acted on, if any.
        """
        super().__init__(message)
        self.selector = selector
