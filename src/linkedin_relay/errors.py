# ABOUTME: Base exception class for LinkedIn relay application errors.
# ABOUTME: Provides a common base for all custom exceptions in the application.


class LinkedInRelayError(Exception):
    """Base exception for all LinkedIn relay errors.

    This is the root exception class for the application. All custom
    exceptions should inherit from this class to enable unified
    error handling in the CLI and in host integrations.
    """

    pass
